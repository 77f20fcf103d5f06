"""
Supabase REST client.

Talks to Supabase Auth (password grant) and PostgREST with plain HTTP
calls. Only the handful of operations the stores need are implemented.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 20


class SupabaseError(RuntimeError):
    """A Supabase request failed."""


class AuthError(SupabaseError):
    """Sign-in failed or no session is present."""


class SupabaseSession:
    """
    An authenticated connection to one Supabase project.

    Rows are read and written with the user's access token, so row level
    security in the project decides what the user can see.
    """

    def __init__(self, supabase_url: str, supabase_key: str, timeout: float = DEFAULT_TIMEOUT):
        self.supabase_url = supabase_url.rstrip("/")
        self.supabase_key = supabase_key
        self.timeout = timeout
        self.access_token: Optional[str] = None
        self.user_id: Optional[str] = None
        self.email: Optional[str] = None

    @property
    def signed_in(self) -> bool:
        return bool(self.access_token and self.user_id)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> str:
        """
        Sign in with email and password.

        Returns:
            The user id

        Raises:
            AuthError: If the credentials are rejected or the request fails
        """
        endpoint = f"{self.supabase_url}/auth/v1/token?grant_type=password"
        payload = {"email": email.strip(), "password": password}
        try:
            response = requests.post(endpoint, headers=self._anon_headers(), json=payload,
                                     timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthError(f"Could not reach Supabase: {e}") from e
        if response.status_code >= 300:
            raise AuthError(self._extract_error(response))

        body = response.json()
        user = body.get("user") or {}
        if not body.get("access_token") or not user.get("id"):
            raise AuthError("Sign-in returned no access token or user id.")
        self.access_token = body["access_token"]
        self.user_id = user["id"]
        self.email = user.get("email", email.strip())
        logger.info(f"Signed in as {self.email}")
        return self.user_id

    def sign_up(self, email: str, password: str):
        """Register a new account. Supabase may require email confirmation before sign-in."""
        endpoint = f"{self.supabase_url}/auth/v1/signup"
        payload = {"email": email.strip(), "password": password}
        try:
            response = requests.post(endpoint, headers=self._anon_headers(), json=payload,
                                     timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthError(f"Could not reach Supabase: {e}") from e
        if response.status_code >= 300:
            raise AuthError(self._extract_error(response))

    def sign_out(self):
        """End the session. The local session is dropped even if the server call fails."""
        if self.access_token:
            try:
                requests.post(
                    f"{self.supabase_url}/auth/v1/logout",
                    headers=self._auth_headers(),
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                logger.warning(f"Sign-out request failed: {e}")
        self.access_token = None
        self.user_id = None
        self.email = None

    # ------------------------------------------------------------------
    # PostgREST
    # ------------------------------------------------------------------

    def select(self, table: str, order: str = "inserted_at.asc") -> List[Dict[str, Any]]:
        """Fetch every row of a table visible to the user."""
        params = {"select": "*", "order": order}
        response = self._request("get", table, params=params)
        rows = response.json()
        if not isinstance(rows, list):
            raise SupabaseError("Unexpected response format while loading rows.")
        return rows

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored."""
        response = self._request(
            "post", table, json=row, headers={"Prefer": "return=representation"}
        )
        return self._single_row(response)

    def update(self, table: str, row_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Update one row by id and return it as stored."""
        response = self._request(
            "patch", table,
            params={"id": f"eq.{row_id}"},
            json=fields,
            headers={"Prefer": "return=representation"},
        )
        return self._single_row(response)

    def delete(self, table: str, row_id: str):
        """Delete one row by id."""
        self._request("delete", table, params={"id": f"eq.{row_id}"})

    def _request(self, method: str, table: str, params: Optional[dict] = None,
                 json: Optional[dict] = None, headers: Optional[dict] = None) -> requests.Response:
        url = f"{self.supabase_url}/rest/v1/{table}"
        all_headers = {**self._auth_headers(), **(headers or {})}
        try:
            response = requests.request(method, url, headers=all_headers, params=params,
                                        json=json, timeout=self.timeout)
        except requests.RequestException as e:
            raise SupabaseError(f"{method.upper()} {table} failed: {e}") from e
        if response.status_code >= 300:
            raise SupabaseError(self._extract_error(response))
        return response

    @staticmethod
    def _single_row(response: requests.Response) -> Dict[str, Any]:
        rows = response.json()
        if isinstance(rows, list):
            if not rows:
                raise SupabaseError("No row returned.")
            return rows[0]
        return rows

    def _anon_headers(self) -> Dict[str, str]:
        return {
            "apikey": self.supabase_key,
            "Content-Type": "application/json",
        }

    def _auth_headers(self) -> Dict[str, str]:
        if not self.access_token:
            raise AuthError("Not signed in.")
        return {
            "apikey": self.supabase_key,
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _extract_error(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            msg = (body.get("message") or body.get("msg")
                   or body.get("error_description") or body.get("error"))
            if msg:
                return f"HTTP {response.status_code}: {msg}"
        text = (response.text or "").strip()
        if text:
            return f"HTTP {response.status_code}: {text[:300]}"
        return f"HTTP {response.status_code}: request failed"
