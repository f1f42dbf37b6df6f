"""HTTP client for the tracker API and the status board built from it.

`TrackerClient` keeps the bearer token for the session. Any failed call
raises `ApiError` carrying the server's `error` message; a 401 on an
authenticated call also drops the held token so the caller must log in
again.

The client accepts any `httpx.Client`, which lets tests drive it through
FastAPI's `TestClient`.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .models import STATUSES

logger = logging.getLogger("tracker.client")


class ApiError(Exception):
    """A non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def group_by_status(applications: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Split applications into one column per status, keeping their order."""
    columns: Dict[str, List[Dict[str, Any]]] = {status: [] for status in STATUSES}
    for item in applications:
        columns.setdefault(item["status"], []).append(item)
    return columns


class TrackerClient:
    def __init__(self, base_url: str = "http://localhost:8000", token: Optional[str] = None,
                 http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.token = token
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def authenticated(self) -> bool:
        return self.token is not None

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None, auth: bool = True):
        headers = {"Content-Type": "application/json"}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        res = self._http.request(method, path, json=body, headers=headers)
        if res.is_error:
            try:
                message = res.json().get("error") or "Request failed"
            except ValueError:
                message = "Request failed"
            if res.status_code == 401 and auth:
                logger.info("session rejected, clearing token")
                self.token = None
            raise ApiError(res.status_code, message)
        if res.status_code == 204:
            return None
        return res.json()

    def health(self) -> bool:
        return bool(self._request("GET", "/health", auth=False).get("ok"))

    def register(self, email: str, password: str) -> str:
        self.token = self._request("POST", "/auth/register", {"email": email, "password": password}, auth=False)["token"]
        return self.token

    def login(self, email: str, password: str) -> str:
        self.token = self._request("POST", "/auth/login", {"email": email, "password": password}, auth=False)["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    def list_applications(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/applications")["applications"]

    def create_application(self, company: str, role: str, **fields) -> Dict[str, Any]:
        body = {"company": company, "role": role, **fields}
        return self._request("POST", "/applications", body)["application"]

    def update_application(self, application_id: int, **fields) -> Dict[str, Any]:
        return self._request("PATCH", f"/applications/{application_id}", fields)["application"]

    def delete_application(self, application_id: int) -> None:
        self._request("DELETE", f"/applications/{application_id}")

    def stats(self) -> Dict[str, Any]:
        return self._request("GET", "/stats")

    def move(self, application: Dict[str, Any], status: str) -> Dict[str, Any]:
        """Move an application to another column; no request if unchanged."""
        if application["status"] == status:
            return application
        return self.update_application(application["id"], status=status)

    def board(self) -> Dict[str, Any]:
        """Fetch applications and stats and return the grouped board."""
        applications = self.list_applications()
        return {"columns": group_by_status(applications), "stats": self.stats()}
