# holdings/settings.py
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_access_token: Optional[str] = None   # signed-in user's JWT, anon key if unset
    request_timeout: float = 20.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from the environment (and a .env file, if present).

        Requires, for saving pivots:
            export SUPABASE_URL="https://<project>.supabase.co"
            export SUPABASE_ANON_KEY="..."
        """
        timeout = os.getenv("SUPABASE_TIMEOUT")
        try:
            request_timeout = float(timeout) if timeout else 20.0
        except ValueError:
            logger.warning("Ignoring SUPABASE_TIMEOUT=%r, using 20s", timeout)
            request_timeout = 20.0
        return cls(
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
            supabase_access_token=os.getenv("SUPABASE_ACCESS_TOKEN") or None,
            request_timeout=request_timeout,
            log_level=os.getenv("HOLDINGS_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)
