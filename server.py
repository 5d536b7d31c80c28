#!/usr/bin/env python3
"""HTTP entry point: book search and save-to-Notion endpoints."""

import threading
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from bookshelf.catalog import AladinAPI
from bookshelf.saver import BookSaver
from bookshelf.schema import SchemaFetcher
from bookshelf.writer import PageWriter
from shared.config import Settings
from shared.errors import BookSaverError, ClientInputError
from shared.logging_config import get_logger
from shared.notion_api import NotionAPI

logger = get_logger(__name__)

books_bp = Blueprint("books", __name__)


class ServiceRegistry:
    """Builds the API clients on first use and keeps them for the app's lifetime."""

    def __init__(
        self,
        settings: Settings,
        notion: Optional[NotionAPI] = None,
        catalog: Optional[AladinAPI] = None,
    ):
        self.settings = settings
        self._notion = notion
        self._catalog = catalog
        self._schema_fetcher: Optional[SchemaFetcher] = None
        self._saver: Optional[BookSaver] = None
        # Guards lazy construction: one SchemaFetcher, and so one schema cache, per registry
        self._lock = threading.RLock()

    def catalog(self) -> AladinAPI:
        with self._lock:
            if self._catalog is None:
                self.settings.require_catalog()
                self._catalog = AladinAPI(
                    self.settings.aladin_key, query_type=self.settings.aladin_query_type
                )
            return self._catalog

    def schema_fetcher(self) -> SchemaFetcher:
        self.settings.require_notion()
        with self._lock:
            if self._schema_fetcher is None:
                if self._notion is None:
                    self._notion = NotionAPI(
                        self.settings.notion_token, self.settings.notion_version
                    )
                self._schema_fetcher = SchemaFetcher(
                    self._notion, self.settings.database_id, ttl=self.settings.schema_ttl
                )
            return self._schema_fetcher

    def saver(self) -> BookSaver:
        with self._lock:
            fetcher = self.schema_fetcher()
            if self._saver is None:
                self._saver = BookSaver(
                    fetcher,
                    PageWriter(fetcher.notion),
                    default_status=self.settings.default_status,
                )
            return self._saver


def _services() -> ServiceRegistry:
    return current_app.extensions["book_saver"]


@books_bp.route("/search", methods=["GET"])
def search():
    query = (request.args.get("q") or "").strip()
    if not query:
        raise ClientInputError("q is required")

    books = _services().catalog().search(query)
    return jsonify({"ok": True, "books": [book.to_dict() for book in books]})


@books_bp.route("/save", methods=["POST"])
def save():
    payload = request.get_json(silent=True)
    if payload is None:
        raise ClientInputError("Request body must be JSON")

    page = _services().saver().save(payload)
    return jsonify(page.to_dict())


@books_bp.route("/schema", methods=["GET"])
def schema():
    refresh = request.args.get("refresh", "").lower() in ("1", "true", "yes")
    database_schema = _services().schema_fetcher().get_schema(force_refresh=refresh)
    data = database_schema.to_dict()
    data["ok"] = True
    return jsonify(data)


def _handle_app_error(exc: BookSaverError):
    if exc.status_code >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message)
    else:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
    return jsonify(exc.to_dict()), exc.status_code


def _handle_http_error(exc: HTTPException):
    return jsonify({"ok": False, "message": exc.description}), exc.code


def _handle_unexpected_error(exc: Exception):
    logger.exception("Unhandled error while serving %s", request.path)
    return jsonify({"ok": False, "message": str(exc) or "Unknown error"}), 500


def create_app(
    settings: Optional[Settings] = None,
    notion: Optional[NotionAPI] = None,
    catalog: Optional[AladinAPI] = None,
) -> Flask:
    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.extensions["book_saver"] = ServiceRegistry(
        settings or Settings.from_env(), notion=notion, catalog=catalog
    )
    app.register_blueprint(books_bp)
    app.register_error_handler(BookSaverError, _handle_app_error)
    app.register_error_handler(HTTPException, _handle_http_error)
    app.register_error_handler(Exception, _handle_unexpected_error)
    return app
