"""Destination database schema: parsing and a short-lived cache."""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from shared.errors import ConfigurationError, SchemaShapeError
from shared.logging_config import get_logger
from shared.notion_api import NotionAPI

logger = get_logger(__name__)

CHOICE_TYPES = ("select", "multi_select", "status")


class PropertyType(str, Enum):
    TITLE = "title"
    RICH_TEXT = "rich_text"
    URL = "url"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DATE = "date"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    STATUS = "status"

    @classmethod
    def parse(cls, raw_type: Any) -> Optional["PropertyType"]:
        try:
            return cls(raw_type)
        except ValueError:
            return None


@dataclass(frozen=True)
class PropertySpec:
    name: str
    type: Optional[PropertyType]
    raw_type: str
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DatabaseSchema:
    database_id: str
    title_property_name: str
    properties: Dict[str, PropertySpec] = field(default_factory=dict)

    def get(self, name: str) -> Optional[PropertySpec]:
        return self.properties.get(name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "databaseId": self.database_id,
            "titleProperty": self.title_property_name,
            "properties": {
                name: {"type": spec.raw_type, "options": list(spec.options)}
                for name, spec in self.properties.items()
            },
        }


def _option_names(raw_type: str, prop_data: Dict[str, Any]) -> Tuple[str, ...]:
    if raw_type not in CHOICE_TYPES:
        return ()
    config = prop_data.get(raw_type) or {}
    names: List[str] = []
    for option in config.get("options") or []:
        name = option.get("name") if isinstance(option, dict) else None
        if name and name not in names:
            names.append(name)
    return tuple(names)


def parse_schema(database_id: str, database: Any) -> DatabaseSchema:
    """Turn a Notion database object into a DatabaseSchema."""
    properties = database.get("properties") if isinstance(database, dict) else None
    if not isinstance(properties, dict) or not properties:
        raise SchemaShapeError(
            "Notion database has no usable properties map",
            details={"database_id": database_id},
        )

    specs: Dict[str, PropertySpec] = {}
    title_names: List[str] = []
    for prop_key, prop_data in properties.items():
        if not isinstance(prop_data, dict):
            continue
        raw_type = str(prop_data.get("type") or "")
        spec = PropertySpec(
            name=prop_key,
            type=PropertyType.parse(raw_type),
            raw_type=raw_type,
            options=_option_names(raw_type, prop_data),
        )
        specs[prop_key] = spec
        if spec.type is PropertyType.TITLE:
            title_names.append(prop_key)

    if len(title_names) != 1:
        raise SchemaShapeError(
            "Notion database must have exactly one title property",
            details={"database_id": database_id, "title_properties": title_names},
        )

    return DatabaseSchema(
        database_id=database_id,
        title_property_name=title_names[0],
        properties=specs,
    )


@dataclass
class CachedSchema:
    value: DatabaseSchema
    fetched_at: float


class SchemaFetcher:
    """Fetches the destination schema and keeps it for ``ttl`` seconds."""

    def __init__(
        self,
        notion: Optional[NotionAPI],
        database_id: Optional[str],
        ttl: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.notion = notion
        self.database_id = database_id
        self.ttl = ttl
        self._clock = clock
        self._cached: Optional[CachedSchema] = None
        self._lock = threading.Lock()

    def _fresh(self) -> Optional[DatabaseSchema]:
        with self._lock:
            cached = self._cached
        if cached and self._clock() - cached.fetched_at < self.ttl:
            return cached.value
        return None

    def get_schema(self, force_refresh: bool = False) -> DatabaseSchema:
        if not self.database_id or self.notion is None:
            raise ConfigurationError(
                "Missing required environment variables: "
                "NOTION_BOOKS_DATABASE_ID (or NOTION_DATABASE_ID) and NOTION_TOKEN"
            )

        if not force_refresh:
            schema = self._fresh()
            if schema is not None:
                return schema

        logger.info("Fetching schema for database %s", self.database_id)
        database = self.notion.get_database(self.database_id)
        schema = parse_schema(self.database_id, database)
        logger.info(
            "Loaded %s properties (title: %s)",
            len(schema.properties),
            schema.title_property_name,
        )

        with self._lock:
            self._cached = CachedSchema(value=schema, fetched_at=self._clock())
        return schema
