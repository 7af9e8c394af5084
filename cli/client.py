from __future__ import annotations

from typing import Any, Dict, List

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for a running ``uvbot serve`` instance."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def get_health(self) -> Dict[str, Any]:
        return self._get("/health")

    def list_locations(self) -> List[Dict[str, Any]]:
        payload = self._get("/locations")
        locations = payload.get("locations")
        if not isinstance(locations, list):
            raise typer.BadParameter("Unexpected response payload when listing locations.")
        return locations

    def get_location(self, name: str) -> Dict[str, Any]:
        return self._get(f"/locations/{name}", not_found=f"Location {name} is not monitored.")

    def _get(self, path: str, not_found: str | None = None) -> Dict[str, Any]:
        try:
            response = self._client.get(path)
            if response.status_code == 404 and not_found:
                raise typer.BadParameter(not_found)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
