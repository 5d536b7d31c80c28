from dataclasses import dataclass
from typing import Any, Dict, Optional

from bookshelf.property_config import PAGE_ICON
from bookshelf.schema import DatabaseSchema
from shared.errors import UpstreamError
from shared.logging_config import get_logger
from shared.notion_api import NotionAPI

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreatedPage:
    page_id: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ok": True, "pageId": self.page_id}
        if self.url:
            data["url"] = self.url
        return data


class PageWriter:
    """Creates one Notion page per call. No batching, no retries."""

    def __init__(self, notion: NotionAPI, icon: Optional[str] = PAGE_ICON):
        self.notion = notion
        self.icon = icon

    def create_page(
        self,
        schema: DatabaseSchema,
        properties: Dict[str, Any],
        cover_url: Optional[str] = None,
    ) -> CreatedPage:
        page = self.notion.create_page(
            schema.database_id, properties, cover_url=cover_url, icon=self.icon
        )
        page_id = page.get("id") if isinstance(page, dict) else None
        if not page_id:
            raise UpstreamError("Notion page create returned no page id", details=page)

        logger.info("Successfully created page: %s", page_id)
        return CreatedPage(page_id=page_id, url=page.get("url"))
