from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the distance service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def record(self, distance: float) -> Dict[str, Any]:
        return self._request("POST", "/distances", json={"distance": distance})

    def latest(self) -> Dict[str, Any]:
        return self._request("GET", "/distances/latest")

    def stats(self) -> Dict[str, Any]:
        return self._request("GET", "/distances/stats")

    def list_readings(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        filtered = {key: value for key, value in params.items() if value is not None}
        return self._request("GET", "/distances", params=filtered)

    def delete(self, reading_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/distances/{reading_id}")

    def delete_all(self) -> Dict[str, Any]:
        return self._request("DELETE", "/distances")

    def generate(self, count: Optional[int]) -> Dict[str, Any]:
        body = {} if count is None else {"count": count}
        return self._request("POST", "/generate-sample-data", json=body)

    def health(self) -> Dict[str, Any]:
        response = self._send("GET", "/health")
        # The health check answers 500 with a full body when the database is down.
        if response.status_code in (200, 500):
            return response.json()
        self._raise_for_status(response)
        return response.json()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._send(method, path, **kwargs)
        self._raise_for_status(response)
        return response.json()

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            ApiClient._handle_http_error(exc)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("error")
            if data.get("details"):
                detail = f"{detail} ({data['details']})"
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
