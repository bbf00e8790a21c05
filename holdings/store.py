# holdings/store.py
"""
Saved pivots in Supabase (PostgREST table ``saved_pivots``).

Table columns: id, user_id, name, data (jsonb pivot), created_at.
Row-level security scopes rows to the signed-in user; list() also filters
on user_id so the anon key alone cannot leak other users' pivots.

Usage:
    store = SupabasePivotStore.from_settings(Settings.from_env())
    store.ping()
    saved = store.save(user_id, pivot_name(), table)
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

import requests

from .errors import ConfigurationError, PersistenceError
from .models import SavedPivot
from .pivot import PivotTable
from .settings import Settings

logger = logging.getLogger(__name__)

TABLE = "saved_pivots"


def pivot_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Pivot_{now.strftime('%d-%m-%Y')}_{now.strftime('%H-%M-%S')}"


class SupabasePivotStore:
    def __init__(self, url: str, api_key: str, access_token: Optional[str] = None,
                 timeout: float = 20.0, session: Optional[requests.Session] = None):
        if not url or not api_key:
            raise ConfigurationError(
                "Missing Supabase settings. Create a .env file with SUPABASE_URL and SUPABASE_ANON_KEY"
            )
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "SupabasePivotStore":
        return cls(
            settings.supabase_url or "",
            settings.supabase_anon_key or "",
            access_token=settings.supabase_access_token,
            timeout=settings.request_timeout,
            session=session,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.debug("%s %s failed: %s", method, url, e, exc_info=True)
            raise PersistenceError(f"{method} {path} failed: {e}") from e
        return resp

    def _pivots(self, resp: requests.Response) -> List[SavedPivot]:
        try:
            return [SavedPivot.model_validate(r) for r in resp.json() or []]
        except (ValueError, TypeError) as e:
            raise PersistenceError(f"Unexpected response from {TABLE}: {e}") from e

    def ping(self) -> None:
        """Check the backend is reachable; raises ConfigurationError otherwise."""
        try:
            self._request("GET", TABLE, params={"select": "id", "limit": "1"})
        except PersistenceError as e:
            raise ConfigurationError(f"Supabase is not reachable: {e}") from e

    def save(self, owner_id: str, name: str, table: PivotTable) -> SavedPivot:
        payload = {"user_id": owner_id, "name": name, "data": table.to_dict()}
        resp = self._request("POST", TABLE, json=payload, headers={"Prefer": "return=representation"})
        rows = self._pivots(resp)
        if not rows:
            raise PersistenceError(f"Saving {name} returned no row")
        logger.info("Saved pivot %s (%d companies)", name, len(table))
        return rows[0]

    def list(self, owner_id: str) -> List[SavedPivot]:
        """Saved pivots of ``owner_id``, newest first."""
        resp = self._request("GET", TABLE, params={
            "select": "*",
            "user_id": f"eq.{owner_id}",
            "order": "created_at.desc",
        })
        return self._pivots(resp)

    def delete(self, pivot_id: str) -> None:
        self._request("DELETE", TABLE, params={"id": f"eq.{pivot_id}"})
