"""
Build Notion page properties for a book from the destination database schema.

Every logical book field is matched to a schema property by name, and the value
is shaped according to that property's declared type. Properties the schema
does not declare are never emitted, and blank values never produce an entry.
"""

import math
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from bookshelf.property_config import DEFAULT_STATUS, FIELD_CANDIDATES, TITLE_FIELD
from bookshelf.schema import DatabaseSchema, PropertySpec, PropertyType
from shared.logging_config import get_logger
from shared.utils import clean_multi_select_value, is_blank

logger = get_logger(__name__)

PropertyPayload = Dict[str, Dict[str, Any]]
PropertyBuilder = Callable[[PropertySpec, Any], Optional[Dict[str, Any]]]

# Notion rejects rich text objects longer than this
RICH_TEXT_LIMIT = 2000

TRUE_STRINGS = {"true", "yes", "y", "1", "on", "checked", "o"}
FALSE_STRINGS = {"false", "no", "n", "0", "off", "unchecked", "x"}


def _as_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item).strip() for item in value if not is_blank(item))
    return str(value).strip()


def _truncate(text: str) -> str:
    if len(text) > RICH_TEXT_LIMIT:
        return text[: RICH_TEXT_LIMIT - 3] + "..."
    return text


def _rich_text_items(value: Any) -> Optional[List[Dict[str, Any]]]:
    text = _as_text(value)
    if not text:
        return None
    return [{"text": {"content": _truncate(text)}}]


def _build_title(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    items = _rich_text_items(value)
    return {"title": items} if items else None


def _build_rich_text(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    items = _rich_text_items(value)
    return {"rich_text": items} if items else None


def _build_url(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, (list, tuple)):
        value = next((item for item in value if not is_blank(item)), "")
    url = str(value).strip()
    return {"url": url} if url else None


def coerce_number(value: Any) -> Optional[float]:
    """Return an int/float for numeric input, or None when it is not a valid number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip().replace(",", "")
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def _build_number(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    number = coerce_number(value)
    if number is None:
        logger.debug("Skipping %s: '%s' is not a number", spec.name, value)
        return None
    return {"number": number}


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        return bool(text)
    return bool(value)


def _build_checkbox(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    return {"checkbox": coerce_bool(value)}


def _iso_date(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    text = str(value).strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return text


def _build_date(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, Mapping):
        start = _iso_date(value.get("start"))
        end = _iso_date(value.get("end"))
    else:
        start, end = _iso_date(value), None
    if not start:
        logger.debug("Skipping %s: '%s' is not an ISO date", spec.name, value)
        return None
    date_value: Dict[str, Any] = {"start": start}
    if end:
        date_value["end"] = end
    return {"date": date_value}


def _build_select(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    name = _as_text(value)
    return {"select": {"name": name}} if name else None


def _multi_select_names(value: Any, clean: bool = True) -> List[str]:
    if isinstance(value, str):
        raw_names: Sequence[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        raw_names = list(value)
    else:
        raw_names = [value]

    names: List[str] = []
    for raw in raw_names:
        if is_blank(raw):
            continue
        # Declared options are matched as written; only free-form names are cleaned
        name = clean_multi_select_value(str(raw)) if clean else str(raw).strip()
        if name and name not in names:
            names.append(name)
    return names


def _build_multi_select(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    names = _multi_select_names(value, clean=not spec.options)
    if spec.options:
        dropped = [name for name in names if name not in spec.options]
        if dropped:
            logger.info("Dropping unknown %s options: %s", spec.name, ", ".join(dropped))
        names = [name for name in names if name in spec.options]
    if not names:
        return None
    return {"multi_select": [{"name": name} for name in names]}


def _build_status(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    if not spec.options:
        logger.debug("Skipping %s: status property has no options", spec.name)
        return None
    name = _as_text(value)
    if name not in spec.options:
        logger.info("Status '%s' not found in %s, using '%s'", name, spec.name, spec.options[0])
        name = spec.options[0]
    return {"status": {"name": name}}


PROPERTY_BUILDERS: Dict[PropertyType, PropertyBuilder] = {
    PropertyType.TITLE: _build_title,
    PropertyType.RICH_TEXT: _build_rich_text,
    PropertyType.URL: _build_url,
    PropertyType.NUMBER: _build_number,
    PropertyType.CHECKBOX: _build_checkbox,
    PropertyType.DATE: _build_date,
    PropertyType.SELECT: _build_select,
    PropertyType.MULTI_SELECT: _build_multi_select,
    PropertyType.STATUS: _build_status,
}


def build_property_value(spec: PropertySpec, value: Any) -> Optional[Dict[str, Any]]:
    """Shape one value for one property, or None when nothing should be written."""
    if is_blank(value) or spec.type is None:
        return None
    return PROPERTY_BUILDERS[spec.type](spec, value)


def resolve_property(schema: DatabaseSchema, candidates: Sequence[str]) -> Optional[PropertySpec]:
    """Return the first candidate property the schema declares."""
    for name in candidates:
        spec = schema.get(name)
        if spec is not None:
            return spec
    return None


def _field_value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def build_properties(
    schema: DatabaseSchema,
    record: Any,
    default_status: Optional[str] = DEFAULT_STATUS,
    field_candidates: Optional[Mapping[str, Sequence[str]]] = None,
) -> PropertyPayload:
    """Map a book record (BookRecord or dict) onto the schema's properties."""
    field_candidates = FIELD_CANDIDATES if field_candidates is None else field_candidates
    properties: PropertyPayload = {}

    title_spec = schema.properties[schema.title_property_name]
    title_value = build_property_value(title_spec, _field_value(record, TITLE_FIELD))
    if title_value:
        properties[title_spec.name] = title_value

    for field, candidates in field_candidates.items():
        spec = resolve_property(schema, candidates)
        if spec is None or spec.type is PropertyType.TITLE or spec.name in properties:
            continue

        value = _field_value(record, field)
        if field == "status" and is_blank(value):
            value = default_status

        built = build_property_value(spec, value)
        if built is not None:
            properties[spec.name] = built

    return properties
