from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pokesync.app import open_service
from pokesync.config import ConfigurationError, configure_logging, get_sync_config
from pokesync.domain.errors import (
    InputValidationError,
    NotFoundError,
    UpstreamUnavailableError,
)
from pokesync.domain.model import MAX_PAGE_LIMIT, CatalogEntity, LocalRecord, SyncReport
from pokesync.domain.validation import (
    validate_count,
    validate_key,
    validate_new_record,
    validate_offset,
    validate_partial,
    validate_record_id,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pokesync.app import CatalogService

log = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_INVALID = 2
EXIT_UNAVAILABLE = 3
EXIT_NOT_FOUND = 4

DEFAULT_QUERY_LIMIT = 20


def _add_record_fields(parser: argparse.ArgumentParser, *, require_name: bool) -> None:
    parser.add_argument("--name", type=str, required=require_name, help="Display name")
    parser.add_argument(
        "--category",
        dest="categories",
        action="append",
        help="Category label (repeat for several)",
    )
    parser.add_argument("--price", type=int, help="Price as a positive integer")
    parser.add_argument("--image-url", type=str, help="Image URL")
    parser.add_argument("--description", type=str, help="Free-text description")
    parser.add_argument("--level", type=int, help="Level")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mirror the PokeAPI catalog into a local store")
    parser.add_argument(
        "--skip-bootstrap",
        action="store_true",
        help="Do not fill an empty store before running the command",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    bootstrap = subparsers.add_parser("bootstrap", help="Fill the store if it is empty")
    bootstrap.add_argument(
        "--target",
        type=int,
        default=None,
        help="Number of entities to import (defaults to config)",
    )

    seed = subparsers.add_parser("seed", help="Append the first N upstream entities")
    seed.add_argument("--limit", type=int, default=DEFAULT_QUERY_LIMIT)

    import_one = subparsers.add_parser("import", help="Import one entity by name or id")
    import_one.add_argument("key", type=str)

    create = subparsers.add_parser("create", help="Create a local record by hand")
    _add_record_fields(create, require_name=True)

    listing = subparsers.add_parser("list", help="List local records")
    listing.add_argument("--basic", action="store_true", help="Only print id and name")

    show = subparsers.add_parser("show", help="Show one local record")
    show.add_argument("id", type=int)

    update = subparsers.add_parser("update", help="Update fields of a local record")
    update.add_argument("id", type=int)
    _add_record_fields(update, require_name=False)

    remove = subparsers.add_parser("remove", help="Delete a local record")
    remove.add_argument("id", type=int)

    upstream = subparsers.add_parser("upstream", help="Query PokeAPI without storing")
    upstream_sub = upstream.add_subparsers(dest="upstream_command", required=True)
    upstream_show = upstream_sub.add_parser("show", help="Fetch one entity")
    upstream_show.add_argument("key", type=str)
    upstream_list = upstream_sub.add_parser("list", help="Fetch one page of entities")
    upstream_list.add_argument("--limit", type=int, default=DEFAULT_QUERY_LIMIT)
    upstream_list.add_argument("--offset", type=int, default=0)
    upstream_type = upstream_sub.add_parser("type", help="Fetch entities of one category")
    upstream_type.add_argument("category", type=str)
    upstream_type.add_argument("--limit", type=int, default=DEFAULT_QUERY_LIMIT)

    return parser.parse_args(list(argv))


def _record_fields(args: argparse.Namespace) -> dict[str, object]:
    candidates: dict[str, object] = {
        "name": args.name,
        "categories": args.categories,
        "price": args.price,
        "image_url": args.image_url,
        "description": args.description,
        "level": args.level,
    }
    return {name: value for name, value in candidates.items() if value is not None}


def _validate(args: argparse.Namespace) -> None:
    """Reject malformed input before any service call; normalizes ``args`` in place."""

    match args.command:
        case "bootstrap" if args.target is not None:
            validate_count(args.target, name="target")
        case "seed":
            validate_count(args.limit, name="limit")
        case "import":
            args.key = validate_key(args.key)
        case "create":
            args.fields = validate_new_record(_record_fields(args))
        case "show" | "remove":
            validate_record_id(args.id)
        case "update":
            validate_record_id(args.id)
            args.fields = validate_partial(_record_fields(args))
        case "upstream":
            if args.upstream_command == "show":
                args.key = validate_key(args.key)
            elif args.upstream_command == "list":
                validate_count(args.limit, name="limit", maximum=MAX_PAGE_LIMIT)
                validate_offset(args.offset)
            else:
                args.category = validate_key(args.category)
                validate_count(args.limit, name="limit")
        case _:
            pass


def _to_json(value: object) -> object:
    if isinstance(value, LocalRecord):
        return value.to_dict()
    if isinstance(value, CatalogEntity | SyncReport):
        return asdict(value)
    if isinstance(value, list):
        return [_to_json(item) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


async def _dispatch(service: CatalogService, args: argparse.Namespace, *, target: int) -> object:
    match args.command:
        case "bootstrap":
            return await service.bootstrap_if_empty(target)
        case "seed":
            return await service.seed(args.limit)
        case "import":
            return await service.import_one(args.key)
        case "create":
            return await service.create(args.fields)
        case "list":
            return await (service.get_basic_list() if args.basic else service.get_all())
        case "show":
            return await service.get_one(args.id)
        case "update":
            return await service.update(args.id, args.fields)
        case "remove":
            return await service.remove(args.id)
        case "upstream" if args.upstream_command == "show":
            return await service.query_upstream_by_name(args.key)
        case "upstream" if args.upstream_command == "list":
            return await service.query_upstream_list(args.limit, args.offset)
        case "upstream":
            return await service.query_upstream_by_category(args.category, args.limit)
        case _:
            raise ValueError(f"Unsupported command: {args.command}")


async def _run(args: argparse.Namespace) -> object:
    sync_config = get_sync_config()
    target = getattr(args, "target", None) or sync_config.bootstrap_target
    # the bootstrap command runs the same step itself, with its own target
    startup_bootstrap = not args.skip_bootstrap and args.command != "bootstrap"
    async with open_service(bootstrap=startup_bootstrap, sync_config=sync_config) as service:
        return await _dispatch(service, args, target=target)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        _validate(parsed_args)
    except InputValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_INVALID)

    try:
        result = asyncio.run(_run(parsed_args))
    except NotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_NOT_FOUND)
    except UpstreamUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_UNAVAILABLE)
    except (InputValidationError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_INVALID)
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_ERROR)

    print(json.dumps(_to_json(result), ensure_ascii=False, indent=2))  # noqa: T201


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
