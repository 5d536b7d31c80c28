import os
from dataclasses import dataclass
from typing import List, Optional

from shared.errors import ConfigurationError
from shared.utils import get_aladin_key, get_database_id, get_notion_token

DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_SCHEMA_TTL = 30.0
DEFAULT_QUERY_TYPE = "Keyword"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of seconds, got '{raw}'") from exc


@dataclass
class Settings:
    notion_token: Optional[str] = None
    database_id: Optional[str] = None
    notion_version: str = DEFAULT_NOTION_VERSION
    aladin_key: Optional[str] = None
    aladin_query_type: str = DEFAULT_QUERY_TYPE
    schema_ttl: float = DEFAULT_SCHEMA_TTL
    default_status: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            notion_token=get_notion_token(),
            database_id=get_database_id(),
            notion_version=os.getenv("NOTION_VERSION") or DEFAULT_NOTION_VERSION,
            aladin_key=get_aladin_key(),
            aladin_query_type=os.getenv("ALADIN_QUERY_TYPE") or DEFAULT_QUERY_TYPE,
            schema_ttl=_float_env("NOTION_SCHEMA_TTL", DEFAULT_SCHEMA_TTL),
            default_status=os.getenv("BOOK_DEFAULT_STATUS") or None,
        )

    def require_notion(self) -> None:
        """Raise ConfigurationError unless both Notion credentials are present."""
        errors: List[str] = []
        if not self.notion_token:
            errors.append("NOTION_INTERNAL_INTEGRATION_SECRET (or NOTION_TOKEN)")
        if not self.database_id:
            errors.append("NOTION_BOOKS_DATABASE_ID (or NOTION_DATABASE_ID)")
        if errors:
            raise ConfigurationError(
                "Missing required environment variables: " + ", ".join(errors)
            )

    def require_catalog(self) -> None:
        if not self.aladin_key:
            raise ConfigurationError(
                "Missing required environment variables: ALADIN_TTB_KEY (or ALADIN_KEY)"
            )
