#!/usr/bin/env python3

import argparse
import json
import os
import sys
from typing import Dict, List, Optional

from dotenv import load_dotenv

from server import ServiceRegistry, create_app
from shared.config import Settings
from shared.errors import BookSaverError
from shared.logging_config import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search the Aladin catalog and save books to a Notion database"
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    serve.add_argument("--debug", action="store_true", help="Enable the Flask debugger")

    search = subparsers.add_parser("search", help="Search the catalog and print the results")
    search.add_argument("query", help="Title or author to search for")

    save = subparsers.add_parser("save", help="Create a Notion page for one book")
    save.add_argument("--title", help="Book title (required unless --json is given)")
    save.add_argument("--author")
    save.add_argument("--link")
    save.add_argument("--cover")
    save.add_argument("--publisher")
    save.add_argument("--isbn13")
    save.add_argument("--published", help="ISO publication date (YYYY-MM-DD)")
    save.add_argument("--genres", help="Comma-separated genre names")
    save.add_argument("--status", help="Reading status option name")
    save.add_argument("--rating", help="Numeric rating")
    save.add_argument(
        "--json",
        dest="json_file",
        help="Read the book from a JSON file ('-' for stdin); flags override its fields",
    )

    subparsers.add_parser("schema", help="List the destination database properties")

    return parser


SAVE_FIELDS = (
    "title",
    "author",
    "link",
    "cover",
    "publisher",
    "isbn13",
    "published",
    "genres",
    "status",
    "rating",
)


def _save_payload(args: argparse.Namespace) -> Dict:
    payload: Dict = {}
    if args.json_file:
        if args.json_file == "-":
            payload = json.load(sys.stdin)
        else:
            with open(args.json_file, encoding="utf-8") as handle:
                payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValueError("JSON input must be an object")

    for field in SAVE_FIELDS:
        value = getattr(args, field, None)
        if value is not None:
            payload[field] = value
    return payload


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def run_command(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "serve":
        app = create_app(settings)
        app.run(host=args.host, port=args.port, debug=args.debug)
        return 0

    services = ServiceRegistry(settings)

    if args.command == "search":
        books = services.catalog().search(args.query)
        _print_json([book.to_dict() for book in books])
        return 0

    if args.command == "save":
        page = services.saver().save(_save_payload(args))
        _print_json(page.to_dict())
        return 0

    if args.command == "schema":
        schema = services.schema_fetcher().get_schema(force_refresh=True)
        _print_json(schema.to_dict())
        return 0

    raise ValueError(f"Unknown command '{args.command}'")


def main(argv: Optional[List[str]] = None):
    load_dotenv()
    setup_logging()
    logger = get_logger(__name__)

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = run_command(args, Settings.from_env())
    except BookSaverError as exc:
        logger.error(exc.message)
        if exc.details is not None:
            logger.error("Details: %s", exc.details)
        sys.exit(1)
    except (OSError, ValueError) as exc:
        logger.error(str(exc))
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
