# custody/client/session.py
"""
Client-side login state.

An explicit object instead of process-wide globals: create one at boot,
call ``load()`` to pick up a stored login, hand it to ``CustodyClient``.
``clear()`` runs on logout and whenever the server answers 401/403.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from custody.schemas.auth import AuthUser

logger = logging.getLogger(__name__)


class ClientSession:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[AuthUser] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def load(self) -> bool:
        if not self.path or not self.path.exists():
            return False

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self.token = data["token"]
            self.user = AuthUser.model_validate(data["user"]) if data.get("user") else None
        except (OSError, ValueError, KeyError) as e:
            logger.warning("Ignoring unreadable session file %s: %r", self.path, e)
            self.token = None
            self.user = None
            return False

        return self.is_authenticated

    def start(self, token: str, user) -> None:
        self.token = token
        self.user = AuthUser.model_validate(user)
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps({"token": self.token, "user": self.user.model_dump()}),
                encoding="utf-8",
            )

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()

    def auth_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers
