"""
Session store

Holds the bearer token and the signed-in user. When a file path is given the
session is loaded from it on creation, written on every login and emptied on
logout, using the same keys the storefront keeps in browser storage.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

TOKEN_KEY = "gaia-auth-token"
USER_KEY = "gaia-user-data"


def normalize_user(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop the password and give role-less users the customer role."""
    if not user:
        return None
    user = {k: v for k, v in user.items() if k != "password"}
    if not user.get("role"):
        logger.warning("User data is missing role property. Setting default role.")
        user["role"] = "customer"
    return user


class SessionStore:
    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.load()

    def load(self) -> None:
        if not self.path or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return
        self.token = data.get(TOKEN_KEY)
        self.user = normalize_user(data.get(USER_KEY))

    def save(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {TOKEN_KEY: self.token, USER_KEY: self.user} if self.token else {}
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def login(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = normalize_user(user)
        self.save()

    def set_user(self, user: Dict[str, Any]) -> None:
        self.user = normalize_user(user)
        self.save()

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.save()

    @property
    def is_logged_in(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"
