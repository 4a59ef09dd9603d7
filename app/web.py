from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.api import get_service
from datastore.reading_store import StoreError
from services.query_builder import ValidationError, parse_list_query
from services.readings import ReadingService


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


router = APIRouter(include_in_schema=False)


@router.get("/", name="ui_index", response_class=HTMLResponse)
def ui_index(
    request: Request,
    service: ReadingService = Depends(get_service),
) -> HTMLResponse:
    try:
        stats = service.stats()
        latest = service.latest() if stats.total_records else None
    except StoreError as exc:
        return templates.TemplateResponse(
            request,
            "ui/error.html",
            {"message": str(exc), "details": exc.details},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {"stats": stats, "latest": latest},
    )


@router.get("/history", name="ui_history", response_class=HTMLResponse)
def ui_history(
    request: Request,
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    date: Optional[str] = Query(None),
    min_distance: Optional[str] = Query(None, alias="minDistance"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    service: ReadingService = Depends(get_service),
) -> HTMLResponse:
    try:
        query = parse_list_query(
            limit=limit,
            offset=offset,
            min_distance=min_distance,
            date=date or None,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        readings = service.list_readings(query)
    except ValidationError as exc:
        return templates.TemplateResponse(
            request,
            "ui/error.html",
            {"message": exc.message, "details": None},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except StoreError as exc:
        return templates.TemplateResponse(
            request,
            "ui/error.html",
            {"message": str(exc), "details": exc.details},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return templates.TemplateResponse(
        request,
        "ui/history.html",
        {"readings": readings, "query": query},
    )
