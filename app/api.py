"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.schemas import (
    CreatedReadingResponse,
    DeleteAllResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    ReadingCreate,
    ReadingResponse,
    SampleDataRequest,
    SampleDataResponse,
    StatsResponse,
)
from datastore.reading_store import StoreError
from services.query_builder import MAX_SQL_INTEGER, ValidationError, parse_list_query
from services.readings import ReadingService, build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}
NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
SERVER_ERROR = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}}


def get_service() -> ReadingService:
    return build_default_service()


def api_error(status_code: int, message: str, details: Optional[str] = None) -> HTTPException:
    """Build an ``HTTPException`` whose body is the flat ``{error, details}`` shape."""
    detail = {"error": message}
    if details:
        detail["details"] = details
    return HTTPException(status_code=status_code, detail=detail)


def store_failure(exc: StoreError, message: str = "Database error") -> HTTPException:
    return api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, message, exc.details)


@router.get(
    "/distances",
    response_model=List[ReadingResponse],
    summary="List readings with filtering, sorting and pagination.",
    responses={**BAD_REQUEST, **SERVER_ERROR},
)
def list_distances(
    limit: Optional[str] = Query(None, description='Row count or "all". Defaults to 50.'),
    offset: Optional[str] = Query(None, description="Rows to skip when limit is numeric."),
    date: Optional[str] = Query(None, description="Restrict to one day, YYYY-MM-DD."),
    min_distance: Optional[str] = Query(None, alias="minDistance"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    service: ReadingService = Depends(get_service),
) -> List[ReadingResponse]:
    try:
        query = parse_list_query(
            limit=limit,
            offset=offset,
            min_distance=min_distance,
            date=date,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ValidationError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, exc.message) from exc

    try:
        readings = service.list_readings(query)
    except StoreError as exc:
        raise store_failure(exc) from exc
    return [ReadingResponse(**reading.to_dict()) for reading in readings]


@router.get(
    "/distances/stats",
    response_model=StatsResponse,
    summary="Aggregate statistics over every reading.",
    responses=SERVER_ERROR,
)
def distance_stats(service: ReadingService = Depends(get_service)) -> StatsResponse:
    try:
        summary = service.stats()
    except StoreError as exc:
        raise store_failure(exc) from exc
    return StatsResponse(
        total_records=summary.total_records,
        avg_distance=summary.avg_distance,
        min_distance=summary.min_distance,
        max_distance=summary.max_distance,
        first_record=summary.first_record,
        last_record=summary.last_record,
    )


@router.get(
    "/distances/latest",
    response_model=ReadingResponse,
    summary="Most recent reading.",
    responses={**NOT_FOUND, **SERVER_ERROR},
)
def latest_distance(service: ReadingService = Depends(get_service)) -> ReadingResponse:
    try:
        reading = service.latest()
    except KeyError as exc:
        raise api_error(status.HTTP_404_NOT_FOUND, exc.args[0]) from exc
    except StoreError as exc:
        raise store_failure(exc) from exc
    return ReadingResponse(**reading.to_dict())


@router.post(
    "/distances",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedReadingResponse,
    summary="Record a new reading.",
    responses={**BAD_REQUEST, **SERVER_ERROR},
)
def create_distance(
    payload: ReadingCreate,
    service: ReadingService = Depends(get_service),
) -> CreatedReadingResponse:
    try:
        reading = service.record(payload.distance)
    except StoreError as exc:
        raise store_failure(exc, "Failed to save distance") from exc
    return CreatedReadingResponse(**reading.to_dict())


@router.delete(
    "/distances/{reading_id}",
    response_model=DeleteResponse,
    summary="Delete one reading by id.",
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
)
def delete_distance(
    reading_id: str,
    service: ReadingService = Depends(get_service),
) -> DeleteResponse:
    if not (reading_id.isascii() and reading_id.isdigit()):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Distance id must be a number")
    identifier = int(reading_id)
    if identifier > MAX_SQL_INTEGER:
        raise api_error(status.HTTP_404_NOT_FOUND, "Distance record not found")
    try:
        service.delete(identifier)
    except KeyError as exc:
        raise api_error(status.HTTP_404_NOT_FOUND, exc.args[0]) from exc
    except StoreError as exc:
        raise store_failure(exc) from exc
    return DeleteResponse(message="Distance record deleted successfully", id=identifier)


@router.delete(
    "/distances",
    response_model=DeleteAllResponse,
    summary="Delete every reading.",
    responses=SERVER_ERROR,
)
def delete_all_distances(service: ReadingService = Depends(get_service)) -> DeleteAllResponse:
    try:
        deleted = service.delete_all()
    except StoreError as exc:
        raise store_failure(exc) from exc
    return DeleteAllResponse(message="All distance records deleted", deleted_count=deleted)


@router.post(
    "/generate-sample-data",
    response_model=SampleDataResponse,
    summary="Insert synthetic readings for testing.",
    responses={**BAD_REQUEST, **SERVER_ERROR},
)
def generate_sample_data(
    payload: Optional[SampleDataRequest] = Body(None),
    service: ReadingService = Depends(get_service),
) -> SampleDataResponse:
    count = payload.count if payload is not None else None
    if count is None:
        count = get_settings().sample_default_count
    try:
        inserted = service.generate_samples(count)
    except ValueError as exc:
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    except StoreError as exc:
        raise store_failure(exc, "Failed to generate sample data") from exc
    return SampleDataResponse(message=f"Generated {inserted} sample records", count=inserted)


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Liveness and database connectivity check.",
)
def healthcheck(service: ReadingService = Depends(get_service)):
    report = service.health()
    if report.healthy:
        return HealthResponse(
            status="healthy",
            uptime=report.uptime,
            database="connected",
            timestamp=report.timestamp,
        )
    body = HealthResponse(
        status="unhealthy",
        uptime=report.uptime,
        database="disconnected",
        timestamp=report.timestamp,
        error="Database connection failed",
        details=report.details,
    )
    logger.warning("Health check failed", extra={"database": "disconnected"})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json", exclude_none=True),
    )
