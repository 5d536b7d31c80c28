import os
from typing import Any, Optional


def clean_multi_select_value(value: str) -> str:
    """Clean multi-select values to be compatible with Notion."""
    cleaned = (
        value.replace(",", "")
        .replace(";", "")
        .replace("\n", " ")
        .replace("\r", " ")
    )
    cleaned = " ".join(cleaned.split())
    if len(cleaned) > 100:
        cleaned = f"{cleaned[:97]}..."
    return cleaned


def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def pick_first(value: Any) -> str:
    """Return a string from a value that may arrive as a scalar or a list."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _first_env(*env_names: str) -> Optional[str]:
    for name in env_names:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def get_notion_token() -> Optional[str]:
    """Return the Notion token, preferring the internal secret if available."""
    return _first_env("NOTION_INTERNAL_INTEGRATION_SECRET", "NOTION_TOKEN", "NOTION_API_KEY")


def get_database_id(*env_names: str) -> Optional[str]:
    """Return the first populated database ID across the provided env names."""
    candidates = env_names or ("NOTION_BOOKS_DATABASE_ID", "NOTION_DATABASE_ID", "NOTION_DB_ID")
    return _first_env(*candidates)


def get_aladin_key() -> Optional[str]:
    """Return the Aladin TTB key; both the long and short env names are accepted."""
    return _first_env("ALADIN_TTB_KEY", "ALADIN_KEY")
