import json
from typing import Any, Dict, Optional, Union
import logging

from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from shared.errors import UpstreamError

logger = logging.getLogger(__name__)


def _error_details(exc: HTTPResponseError) -> Any:
    body = getattr(exc, "body", None)
    if isinstance(body, (bytes, str)) and body:
        try:
            return json.loads(body)
        except ValueError:
            return body
    return str(exc)


class NotionAPI:
    """Notion API client for database operations."""

    def __init__(self, token: str, notion_version: Optional[str] = None):
        options: Dict[str, str] = {"auth": token}
        if notion_version:
            options["notion_version"] = notion_version
        self.client = Client(**options)

    def _upstream_error(self, action: str, exc: Exception) -> UpstreamError:
        if isinstance(exc, HTTPResponseError):
            status = getattr(exc, "status", None)
            return UpstreamError(
                f"Notion {action} failed ({status})",
                details=_error_details(exc),
                upstream_status=status,
            )
        if isinstance(exc, RequestTimeoutError):
            return UpstreamError(f"Notion {action} timed out", upstream_status=504)
        return UpstreamError(f"Notion {action} failed: {exc}")

    def get_database(self, database_id: str) -> Dict:
        """Get database information."""
        try:
            return self.client.databases.retrieve(database_id)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Error retrieving database %s: %s", database_id, exc)
            raise self._upstream_error("database retrieve", exc) from exc

    def create_page(
        self,
        database_id: str,
        properties: Dict,
        cover_url: Optional[str] = None,
        icon: Optional[Union[str, Dict]] = None,
    ) -> Dict:
        """Create a page inside a database and return the created page object."""
        page_data: Dict[str, Union[Dict, str]] = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }

        if cover_url:
            page_data["cover"] = {
                "type": "external",
                "external": {"url": cover_url},
            }

        if icon:
            if isinstance(icon, str):
                page_data["icon"] = {"type": "emoji", "emoji": icon}
            elif isinstance(icon, dict):
                page_data["icon"] = icon

        try:
            return self.client.pages.create(**page_data)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Error creating page in database %s: %s", database_id, exc)
            raise self._upstream_error("page create", exc) from exc
