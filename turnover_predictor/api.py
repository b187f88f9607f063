# api.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from turnover_predictor.config import API_BASE_URL
from turnover_predictor.session import SessionStore

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("pdf", "excel")

MIME_TYPES = {
    "pdf": "application/pdf",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class ApiError(Exception):
    """A backend call failed; ``str(err)`` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class ExportFile:
    filename: str
    content: bytes
    mime: str


def export_filename(fmt: str, with_recommendations: bool = False) -> str:
    stem = "employee_recommendations" if with_recommendations else "employees"
    return f"{stem}.xlsx" if fmt == "excel" else f"{stem}.{fmt}"


class ApiClient:
    """One method per backend endpoint.

    Every request carries the session's bearer token when there is one. Any
    non-2xx status becomes an :class:`ApiError` with a fixed message; the body
    is not inspected. No retries and no timeout.
    """

    # transport for every client built here; None means httpx opens real connections
    transport = None

    def __init__(self, session: SessionStore, base_url: str = API_BASE_URL, transport=None):
        self.session = session
        self.base_url = base_url
        if transport is not None:
            self.transport = transport

    def _headers(self) -> Dict[str, str]:
        token = self.session.get_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, headers=self._headers(),
                            transport=self.transport, timeout=None)

    def _async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, headers=self._headers(),
                                 transport=self.transport, timeout=None)

    def _request(self, method: str, path: str, failure: str, **kwargs) -> httpx.Response:
        try:
            with self._client() as client:
                resp = client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(failure) from exc
        if not resp.is_success:
            logger.error("%s %s returned %s", method, path, resp.status_code)
            raise ApiError(failure, resp.status_code)
        return resp

    @staticmethod
    def _json(resp: httpx.Response, failure: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("%s %s returned a non-JSON body", resp.request.method, resp.request.url.path)
            raise ApiError(failure, resp.status_code) from exc

    def _request_json(self, method: str, path: str, failure: str, **kwargs) -> Any:
        return self._json(self._request(method, path, failure, **kwargs), failure)

    # ---------------------- AUTH ----------------------
    def login(self, username: str, password: str) -> str:
        resp = self._request("POST", "/api/auth/login", "Login failed",
                             json={"username": username, "password": password})
        try:
            token = resp.json()["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Login response had no access token")
            raise ApiError("Login failed") from exc
        self.session.set_token(token)
        logger.info("Logged in as %s", username)
        return token

    # ---------------------- EMPLOYEES ----------------------
    def list_employees(self) -> List[Dict[str, Any]]:
        return self._request_json("GET", "/api/employees", "Failed to fetch employees")

    def create_employee(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request_json("POST", "/api/employees", "Failed to create employee",
                                  json=payload)

    def update_employee(self, employee_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request_json("PUT", f"/api/employees/{employee_id}", "Failed to update employee",
                                  json=payload)

    def delete_employee(self, employee_id: str) -> None:
        self._request("DELETE", f"/api/employees/{employee_id}", "Failed to delete employee")

    def upload_employees(self, filename: str, content: bytes, mime: str = "text/csv") -> Any:
        resp = self._request("POST", "/api/employees/upload", "Failed to upload employee data",
                             files={"file": (filename, content, mime)})
        return self._json(resp, "Failed to upload employee data") if resp.content else None

    # ---------------------- DASHBOARD ----------------------
    def get_stats(self) -> Dict[str, Any]:
        return self._request_json("GET", "/api/employees/stats", "Failed to fetch dashboard data")

    def get_top_risk(self) -> List[Dict[str, Any]]:
        return self._request_json("GET", "/api/employees/top-risk", "Failed to fetch dashboard data")

    def get_department_risks(self) -> List[Dict[str, Any]]:
        return self._request_json("GET", "/api/employees/department-risks",
                                  "Failed to fetch dashboard data")

    async def _fetch_dashboard(self) -> Tuple[Any, Any, Any]:
        paths = ("/api/employees/stats", "/api/employees/top-risk",
                 "/api/employees/department-risks")
        async with self._async_client() as client:
            responses = await asyncio.gather(*(client.get(p) for p in paths))
        failed = [r for r in responses if not r.is_success]
        if failed:
            for r in failed:
                logger.error("GET %s returned %s", r.request.url.path, r.status_code)
            raise ApiError("Failed to fetch dashboard data", failed[0].status_code)
        stats, top_risk, dept_risks = (self._json(r, "Failed to fetch dashboard data")
                                       for r in responses)
        return stats, top_risk, dept_risks

    def fetch_dashboard(self) -> Tuple[Any, Any, Any]:
        """Stats, top-risk and department-risk fetched concurrently; all or nothing."""
        try:
            return asyncio.run(self._fetch_dashboard())
        except httpx.HTTPError as exc:
            logger.error("Dashboard fetch failed: %s", exc)
            raise ApiError("Failed to fetch dashboard data") from exc

    # ---------------------- EXPORT ----------------------
    def _export(self, path: str, fmt: str, with_recommendations: bool) -> ExportFile:
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {fmt}")
        failure = "Export with recommendations failed" if with_recommendations else "Export failed"
        resp = self._request("GET", path, failure, params={"format": fmt})
        return ExportFile(
            filename=export_filename(fmt, with_recommendations),
            content=resp.content,
            mime=resp.headers.get("content-type") or MIME_TYPES[fmt],
        )

    def export(self, fmt: str) -> ExportFile:
        return self._export("/export", fmt, False)

    def export_with_recommendations(self, fmt: str) -> ExportFile:
        return self._export("/export-with-recommendations", fmt, True)
