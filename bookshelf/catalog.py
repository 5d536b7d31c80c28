"""
Aladin catalog search client.
Maps a free-text query to normalized BookRecord entries.
"""

import json
from typing import Any, Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from bookshelf.models import BookRecord
from shared.errors import ClientInputError, ConfigurationError, UpstreamError
from shared.logging_config import get_logger
from shared.utils import pick_first

logger = get_logger(__name__)

ALADIN_SEARCH_URL = "https://www.aladin.co.kr/ttb/api/ItemSearch.aspx"
DEFAULT_MAX_RESULTS = 10
DEFAULT_COVER_SIZE = "MidBig"


def clean_text(value: str) -> str:
    """Strip HTML tags and decode entities that Aladin leaves in text fields."""
    if not value:
        return ""
    if "<" not in value and "&" not in value:
        return value.strip()
    return BeautifulSoup(value, "html.parser").get_text(" ", strip=True)


def split_category(category_name: str) -> List[str]:
    """'국내도서>소설/시/희곡>한국소설' -> ['소설/시/희곡', '한국소설']"""
    parts = [part.strip() for part in category_name.split(">") if part.strip()]
    # the leading segment is the store root (국내도서, 외국도서) when a path is given
    return parts[1:] if len(parts) > 1 else parts


def normalize_item(item: Dict[str, Any]) -> BookRecord:
    isbn13 = pick_first(item.get("isbn13")) or pick_first(item.get("isbn"))
    return BookRecord(
        title=clean_text(pick_first(item.get("title"))),
        author=clean_text(pick_first(item.get("author"))),
        link=pick_first(item.get("link")).strip(),
        cover=pick_first(item.get("cover")).strip(),
        publisher=clean_text(pick_first(item.get("publisher"))) or None,
        isbn13=isbn13.strip() or None,
        published=pick_first(item.get("pubDate")).strip() or None,
        description=clean_text(pick_first(item.get("description"))) or None,
        genres=split_category(pick_first(item.get("categoryName"))),
    )


def _decode_payload(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        pass
    # output=js sometimes arrives as a JS statement with escaped single quotes
    text = response.text.strip().rstrip(";").replace("\\'", "'")
    try:
        return json.loads(text)
    except ValueError as exc:
        raise UpstreamError(
            "Aladin search returned a malformed payload",
            details=response.text[:500],
        ) from exc


class AladinAPI:
    """Aladin TTB API client for book search."""

    def __init__(
        self,
        ttb_key: Optional[str],
        query_type: str = "Keyword",
        max_results: int = DEFAULT_MAX_RESULTS,
        cover_size: str = DEFAULT_COVER_SIZE,
        session: Optional[requests.Session] = None,
    ):
        self.ttb_key = ttb_key
        self.base_url = ALADIN_SEARCH_URL
        self.query_type = query_type
        self.max_results = max_results
        self.cover_size = cover_size
        self.session = session or requests.Session()

    def _build_params(self, query: str) -> Dict[str, Any]:
        return {
            "ttbkey": self.ttb_key,
            "Query": query,
            "QueryType": self.query_type,
            "MaxResults": self.max_results,
            "start": 1,
            "SearchTarget": "Book",
            "output": "js",
            "Version": "20131101",
            "Cover": self.cover_size,
        }

    def search(self, query: Optional[str]) -> List[BookRecord]:
        """Search the catalog and return normalized book records."""
        query = (query or "").strip()
        if not query:
            raise ClientInputError("q is required")
        if not self.ttb_key:
            raise ConfigurationError(
                "Missing required environment variables: ALADIN_TTB_KEY (or ALADIN_KEY)"
            )

        logger.info("Searching Aladin for '%s'", query)
        try:
            response = self.session.get(self.base_url, params=self._build_params(query))
        except requests.exceptions.RequestException as exc:
            logger.error("Aladin search request failed: %s", exc)
            raise UpstreamError(f"Aladin search failed: {exc}") from exc

        if not response.ok:
            logger.error("Aladin search failed with HTTP %s", response.status_code)
            raise UpstreamError(
                f"Aladin search failed ({response.status_code})",
                details=response.text[:500],
            )

        data = _decode_payload(response)
        if not isinstance(data, dict):
            raise UpstreamError("Aladin search returned a malformed payload", details=data)
        if data.get("errorCode"):
            logger.error("Aladin rejected the search: %s", data.get("errorMessage"))
            raise UpstreamError(
                f"Aladin search failed: {data.get('errorMessage') or data.get('errorCode')}",
                details=data,
            )

        items = data.get("item")
        if not isinstance(items, list):
            raise UpstreamError("Aladin search response has no item list", details=data)

        books = [normalize_item(item) for item in items if isinstance(item, dict)]
        logger.info("Aladin returned %s result(s) for '%s'", len(books), query)
        return books
