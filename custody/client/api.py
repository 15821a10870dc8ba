# custody/client/api.py

import logging
from datetime import datetime, timezone
from typing import List, Optional

import requests

from custody.client.session import ClientSession
from custody.schemas.sheet import SheetSchema

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class CustodyClient:
    """
    Thin wrapper over the HTTP API.

    ``http`` is anything with ``request(method, url, **kwargs)``; a
    ``requests.Session`` by default.
    """

    def __init__(self, base_url: str = "", session: ClientSession = None, http=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else ClientSession()
        self.http = http if http is not None else requests.Session()

    # -------------------------
    # TRANSPORT
    # -------------------------
    def _request(self, method: str, path: str, json=None):
        response = self.http.request(
            method,
            f"{self.base_url}{API_PREFIX}{path}",
            json=json,
            headers=self.session.auth_headers(),
            timeout=DEFAULT_TIMEOUT,
        )

        if response.status_code in (401, 403) and self.session.is_authenticated:
            logger.info("Session rejected by server (%s), logging out", response.status_code)
            self.session.clear()

        if response.status_code >= 400:
            raise ApiError(response.status_code, _error_message(response))

        return response.json() if response.content else None

    # -------------------------
    # AUTH
    # -------------------------
    def register(self, name: str, email: str, password: str):
        data = self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        self.session.start(data["token"], data["user"])
        return self.session.user

    def login(self, email: str, password: str):
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.session.start(data["token"], data["user"])
        return self.session.user

    def logout(self) -> None:
        self.session.clear()

    # -------------------------
    # SHEETS
    # -------------------------
    def get_sheets(self) -> List[SheetSchema]:
        # list view degrades to empty; the caller shows a notification
        try:
            data = self._request("GET", "/sheets")
        except (ApiError, requests.RequestException) as e:
            logger.error("Error fetching sheets: %r", e)
            return []
        return [SheetSchema.model_validate(item) for item in data]

    def save_sheet(self, sheet: SheetSchema) -> SheetSchema:
        sheet = sheet.model_copy(update={"last_modified": datetime.now(timezone.utc)})
        data = self._request("POST", "/sheets", json=sheet.model_dump(mode="json"))
        return SheetSchema.model_validate(data)

    def delete_sheet(self, sheet_id: str) -> None:
        self._request("DELETE", f"/sheets/{sheet_id}")

    def check_health(self) -> bool:
        try:
            response = self.http.request(
                "GET", f"{self.base_url}{API_PREFIX}/health", timeout=DEFAULT_TIMEOUT
            )
        except requests.RequestException:
            return False
        return response.status_code == 200

    def reference_data(self) -> dict:
        return self._request("GET", "/reference-data")

    # -------------------------
    # USERS (ADMIN / TEAM LEAD)
    # -------------------------
    def list_users(self) -> list:
        return self._request("GET", "/users")

    def create_user(self, name: str, email: str, password: str, role: Optional[str] = None) -> dict:
        payload = {"name": name, "email": email, "password": password}
        if role:
            payload["role"] = role
        return self._request("POST", "/users", json=payload)

    def update_user(self, user_id: str, name: str, email: str, role: str, password: Optional[str] = None) -> None:
        self._request(
            "PUT",
            f"/users/{user_id}",
            json={"name": name, "email": email, "role": role, "password": password},
        )

    def update_user_role(self, user_id: str, role: str) -> None:
        self._request("PUT", f"/users/{user_id}/role", json={"role": role})

    def delete_user(self, user_id: str) -> None:
        self._request("DELETE", f"/users/{user_id}")


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return body.get("error") or str(body)
    return str(body)
