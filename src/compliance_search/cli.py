import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from .cap_synthesizer import build_cap_summary, generate_cap
from .config import SearchConfig
from .errors import InputError
from .hybrid_search import HybridSearchEngine, create_search_engine
from .models import NonConformity, SearchContext
from .registry import StandardsRegistry


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compliance-search",
        description="Bilingual hybrid search over compliance standards and requirements.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    subparsers = parser.add_subparsers(dest="command")

    search = subparsers.add_parser("search", help="Search standards and requirements.")
    _add_common_arguments(search)
    search.add_argument(
        "--format",
        choices=["json", "pretty"],
        default="json",
        help="Output format: compact json or human-readable json.",
    )

    cap = subparsers.add_parser("cap", help="Search, then synthesize a corrective action plan.")
    _add_common_arguments(cap)
    cap.add_argument(
        "--description",
        required=True,
        help="Description of the non-conformity to correct.",
    )
    cap.add_argument(
        "--format",
        choices=["json", "pretty", "text"],
        default="json",
        help="Output format: compact json, human-readable json or a text summary.",
    )

    return parser


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("--registry", required=True, help="Path to the standards registry JSON file.")
    subparser.add_argument("--query", required=True, help="Free-text query.")
    subparser.add_argument("--language", choices=["en", "km"], default="en", help="Query language.")
    subparser.add_argument("--factory", help="Factory id used for context boosting.")
    subparser.add_argument("--config", help="Optional search configuration JSON file.")


def _load_engine(args) -> HybridSearchEngine:
    registry_path = Path(args.registry)
    if not registry_path.exists():
        raise InputError(f"registry file not found: {registry_path}")

    config = None
    if args.config:
        config = SearchConfig.from_dict(json.loads(Path(args.config).read_text(encoding="utf-8")))

    return create_search_engine(StandardsRegistry.from_json(registry_path), config=config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "search":
        return _handle_search(args)
    elif args.command == "cap":
        return _handle_cap(args)
    else:
        parser.print_help()
        return 2


def _handle_search(args) -> int:
    """Handle the search command."""
    try:
        engine = _load_engine(args)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}")
        return 1

    response = engine.hybrid_search(
        args.query, args.language, SearchContext(factory_id=args.factory)
    )
    indent = 2 if args.format == "pretty" else None
    print(json.dumps(response.to_dict(), ensure_ascii=False, indent=indent))
    return 0


def _handle_cap(args) -> int:
    """Handle the cap command."""
    try:
        engine = _load_engine(args)
        response = engine.hybrid_search(
            args.query, args.language, SearchContext(factory_id=args.factory)
        )
        plan = generate_cap(NonConformity(description=args.description), response.results)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}")
        return 1

    if args.format == "text":
        print(build_cap_summary(plan))
        return 0

    indent = 2 if args.format == "pretty" else None
    print(json.dumps(plan.to_dict(), ensure_ascii=False, indent=indent))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
