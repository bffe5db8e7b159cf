"""
Authenticated session for Telofy sync.

Holds the signed-in user and bearer token, persists them to data/auth.json
and keeps the API client's token in step.
"""
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Tuple

from core.exceptions import ApiError
from core.logger import get_logger
from core.paths import AUTH_PATH
from interface.api.client import TelofyApiClient
from interface.api.schemas import AuthResponse

logger = get_logger("auth")


@dataclass
class AuthUser:
    id: str
    name: str
    email: str
    image: Optional[str] = None
    timezone: Optional[str] = None


class AuthSession:
    """Session state; ``is_authenticated`` gates every sync operation."""

    def __init__(self, client: TelofyApiClient, path: Optional[Path] = None):
        self.client = client
        self._path = path if path is not None else AUTH_PATH
        self.user: Optional[AuthUser] = None
        self.token: Optional[str] = None
        self.is_authenticated = False
        self.error: Optional[str] = None
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            user = data.get("user")
            self.user = AuthUser(**user) if user else None
            self.token = data.get("token")
            self.is_authenticated = bool(data.get("is_authenticated")) and self.user is not None
        except (json.JSONDecodeError, OSError, TypeError) as e:
            logger.warning("Auth state at %s is unreadable, signed out: %s", self._path, e)
            self.user, self.token, self.is_authenticated = None, None, False

        # restore token to the client
        if self.token:
            self.client.set_token(self.token)

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "user": asdict(self.user) if self.user else None,
            "token": self.token,
            "is_authenticated": self.is_authenticated,
        }
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def _apply(self, response: AuthResponse) -> None:
        u = response.user
        self.user = AuthUser(id=u.id, name=u.name, email=u.email, image=u.image, timezone=u.timezone)
        self.token = response.token
        self.is_authenticated = True
        self.client.set_token(self.token)
        self._save()

    async def sign_in(self, email: str, password: str) -> Tuple[bool, Optional[str]]:
        self.error = None
        try:
            response = await self.client.sign_in(email, password)
        except ApiError as e:
            self.error = e.message
            logger.warning("Sign in failed for %s: %s", email, e.message)
            return False, e.message
        self._apply(response)
        logger.info("Signed in as %s", email)
        return True, None

    async def sign_up(self, email: str, password: str, name: str) -> Tuple[bool, Optional[str]]:
        self.error = None
        try:
            response = await self.client.sign_up(email, password, name)
        except ApiError as e:
            self.error = e.message
            logger.warning("Sign up failed for %s: %s", email, e.message)
            return False, e.message
        self._apply(response)
        logger.info("Signed up as %s", email)
        return True, None

    async def sign_out(self) -> None:
        """Clear the session; local state is cleared even if the server call fails."""
        if self.token:
            try:
                await self.client.sign_out()
            except ApiError as e:
                logger.warning("Remote sign out failed: %s", e.message)
        self.user = None
        self.token = None
        self.is_authenticated = False
        self.error = None
        self.client.set_token(None)
        self._save()
