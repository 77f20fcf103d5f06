"""
Auth gate.

Tells the UI whether a user session exists. With the Supabase backend a
password sign-in is required; the local backend is always signed in.
Listeners hear about every session change so the window can send the
user back to the sign-in dialog.
"""

import logging
from typing import Callable, List, Optional

from .supabase_client import SupabaseSession, AuthError

logger = logging.getLogger(__name__)


LOCAL_USER = "Local workspace"


class AuthGate:
    """Session state shared by the UI."""

    def __init__(self, session: Optional[SupabaseSession] = None):
        self._session = session
        self._listeners: List[Callable[[bool], None]] = []

    @property
    def requires_sign_in(self) -> bool:
        return self._session is not None

    @property
    def signed_in(self) -> bool:
        return self._session is None or self._session.signed_in

    @property
    def user_label(self) -> str:
        if self._session is None:
            return LOCAL_USER
        return self._session.email or ""

    def add_listener(self, callback: Callable[[bool], None]):
        """Register a callback taking the new signed-in flag."""
        self._listeners.append(callback)

    def require(self):
        """Raise AuthError when no session is present."""
        if not self.signed_in:
            raise AuthError("Not signed in.")

    def sign_in(self, email: str, password: str):
        if self._session is None:
            return
        self._session.sign_in(email, password)
        self._notify()

    def sign_up(self, email: str, password: str):
        if self._session is None:
            return
        self._session.sign_up(email, password)

    def sign_out(self):
        if self._session is None:
            return
        self._session.sign_out()
        logger.info("Signed out")
        self._notify()

    def _notify(self):
        signed_in = self.signed_in
        for callback in self._listeners:
            callback(signed_in)
