from typing import Any, Optional

from bookshelf.models import BookRecord
from bookshelf.property_config import DEFAULT_STATUS
from bookshelf.property_mapper import build_properties
from bookshelf.schema import SchemaFetcher
from bookshelf.writer import CreatedPage, PageWriter
from shared.logging_config import get_logger

logger = get_logger(__name__)


class BookSaver:
    """Saves one book: fetch schema, map properties, create the page."""

    def __init__(
        self,
        schema_fetcher: SchemaFetcher,
        writer: PageWriter,
        default_status: Optional[str] = None,
    ):
        self.schema_fetcher = schema_fetcher
        self.writer = writer
        self.default_status = default_status or DEFAULT_STATUS

    def save(self, payload: Any) -> CreatedPage:
        record = payload if isinstance(payload, BookRecord) else BookRecord.from_payload(payload)
        return self.save_record(record)

    def save_record(self, record: BookRecord) -> CreatedPage:
        logger.info("Saving book: %s", record.title)
        schema = self.schema_fetcher.get_schema()
        properties = build_properties(schema, record, default_status=self.default_status)
        logger.info("Mapped %s properties: %s", len(properties), ", ".join(properties))
        return self.writer.create_page(schema, properties, cover_url=record.cover or None)
