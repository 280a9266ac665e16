"""Service for the signed-in user's identity.

The sign-in handshake happens elsewhere; this service only records its
outcome: the owner id is remembered by the SessionStore, and the token and
profile (email, display name) are kept in a credentials file readable by the
owner only.
"""

from __future__ import annotations

import json
from pathlib import Path

from pomodoro_cli.services.session_store import SessionStore
from pomodoro_cli.utils.logger import get_logger

logger = get_logger(__name__)


class IdentityService:
    """Tracks who, if anyone, is signed in on this device."""

    def __init__(self, session_store: SessionStore, credentials_dir: str | Path):
        self.session_store = session_store
        self.credentials_path = Path(credentials_dir) / "default.json"

    def current_owner_id(self) -> str | None:
        """Owner id of the signed-in user, or None when signed out."""
        return self.session_store.remembered_owner()

    def is_authenticated(self) -> bool:
        return self.current_owner_id() is not None

    def signed_in(
        self,
        owner_id: str,
        token: str | None = None,
        email: str | None = None,
        name: str | None = None,
    ) -> None:
        """Record a successful sign-in and the user's profile."""
        if not owner_id or not owner_id.strip():
            raise ValueError("owner id cannot be empty")
        owner_id = owner_id.strip()

        self.session_store.remember_owner(owner_id)

        cred_data = {"user_id": owner_id}
        if token:
            cred_data["token"] = token
        if email:
            cred_data["email"] = email.strip()
        if name:
            cred_data["name"] = name.strip()
        self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.credentials_path, "w", encoding="utf-8") as f:
            json.dump(cred_data, f, indent=2)
        self.credentials_path.chmod(0o600)
        logger.info("signed in as %s", owner_id)

    def signed_out(self) -> None:
        """Forget the owner and drop stored credentials."""
        self.session_store.forget_owner()
        if self.credentials_path.exists():
            self.credentials_path.unlink()
        logger.info("signed out")

    def load_credentials(self) -> dict | None:
        """Load stored credentials.

        Returns:
            dict with 'user_id' and optionally 'token', 'email' and 'name',
            or None if missing or unreadable
        """
        if not self.credentials_path.exists():
            return None
        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                credentials = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("ignoring unreadable credentials file: %s", e)
            return None
        return credentials if isinstance(credentials, dict) else None

    def profile(self) -> dict[str, str | None] | None:
        """Signed-in user's id, email and display name, or None when signed out."""
        owner_id = self.current_owner_id()
        if owner_id is None:
            return None
        credentials = self.load_credentials() or {}
        return {
            "user_id": owner_id,
            "email": credentials.get("email"),
            "name": credentials.get("name"),
        }

    def token(self) -> str | None:
        """Bearer token for the remote API, if one was stored."""
        credentials = self.load_credentials()
        return credentials.get("token") if credentials else None
