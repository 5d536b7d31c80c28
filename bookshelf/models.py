"""Book record passed between the catalog search and the Notion writer."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from shared.errors import ClientInputError
from shared.utils import is_blank

DateValue = Union[str, Dict[str, Optional[str]]]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


@dataclass
class BookRecord:
    title: str
    author: str = ""
    link: str = ""
    cover: str = ""
    publisher: Optional[str] = None
    isbn13: Optional[str] = None
    published: Optional[DateValue] = None
    description: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    status: Optional[str] = None
    rating: Optional[Union[int, float, str]] = None
    owned: Optional[Any] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "BookRecord":
        """Build a record from a save request body, rejecting a blank title."""
        if not isinstance(payload, dict):
            raise ClientInputError("Request body must be a JSON object")

        title = _text(payload.get("title"))
        if not title:
            raise ClientInputError("title is required")

        genres = payload.get("genres")
        if isinstance(genres, str):
            genres = [part.strip() for part in genres.split(",")]
        elif not isinstance(genres, list):
            genres = []

        published = payload.get("published")
        if not isinstance(published, dict):
            published = _optional_text(published)

        rating = payload.get("rating")
        if is_blank(rating):
            rating = None

        return cls(
            title=title,
            author=_text(payload.get("author")),
            link=_text(payload.get("link")),
            cover=_text(payload.get("cover")),
            publisher=_optional_text(payload.get("publisher")),
            isbn13=_optional_text(payload.get("isbn13")),
            published=published,
            description=_optional_text(payload.get("description")),
            genres=[_text(genre) for genre in genres if not is_blank(genre)],
            status=_optional_text(payload.get("status")),
            rating=rating,
            owned=payload.get("owned"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON responses; empty optional fields are left out."""
        data: Dict[str, Any] = {
            "title": self.title,
            "author": self.author,
            "link": self.link,
            "cover": self.cover,
        }
        optional = {
            "publisher": self.publisher,
            "isbn13": self.isbn13,
            "published": self.published,
            "description": self.description,
            "genres": self.genres,
            "status": self.status,
            "rating": self.rating,
            "owned": self.owned,
        }
        for key, value in optional.items():
            if not is_blank(value):
                data[key] = value
        return data
