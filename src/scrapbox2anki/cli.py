"""CLI for scrapbox2anki - turn Scrapbox pages into Anki notes."""

import argparse
import asyncio
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.json_bundle import deck_to_dict, note_type_to_dict
from .core.errors import Scrapbox2AnkiError
from .core.model import Page, parse_path
from .pipeline import MakeNotesResult, format_report, make_notes
from .runtime import Runtime, build_runtime

LOGGER = logging.getLogger(__name__)


async def _collect(titles: list[str], since: int | None, rt: Runtime) -> MakeNotesResult:
    pages: list[Page] = list(
        await asyncio.gather(*(rt.source.get_page(rt.project, t) for t in titles))
    )
    if since is not None:
        pages = [p for p in pages if p.updated >= since]
    LOGGER.info("%d pages to convert", len(pages))
    return await make_notes(rt.project, pages, rt.cache, rt.tokenizer)


def _issues_to_json(result: MakeNotesResult) -> dict[str, Any]:
    return {
        "warnings": {
            path: {
                "deckNotSpecified": w.deck_not_specified,
                "noteTypeNotSpecified": w.note_type_not_specified,
                "skipped": w.skipped,
            }
            for path, w in result.warnings.items()
        },
        "errors": {
            str(ref): {"name": e.name, "message": e.message}
            for ref, e in result.errors.items()
        },
    }


def cmd_notes(args: argparse.Namespace, rt: Runtime) -> int:
    """Convert pages to notes and write the bundle."""
    titles = args.titles or list(rt.source.list_titles(rt.project))
    result = asyncio.run(_collect(titles, args.since, rt))
    out = args.out or rt.config.output.path

    if args.json:
        rt.builder.build(result.records, out)
        print(
            json.dumps(
                {"notes": len(result.records), "out": str(out), **_issues_to_json(result)},
                ensure_ascii=False,
            )
        )
        return 0

    if result.has_issues:
        print(format_report(result))
        if not args.yes:
            answer = input("Continue? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted.")
                return 1

    rt.builder.build(result.records, out)
    print(f"Wrote {len(result.records)} notes to {out}")
    return 0


def cmd_deck(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the deck defined on a page."""
    path = parse_path(args.title, rt.project)

    async def _get():
        return await rt.cache.get_deck(path)

    try:
        deck = asyncio.run(_get())
    except Scrapbox2AnkiError as e:
        print(f"{e.name}: {e.message}", file=sys.stderr)
        return 1
    print(json.dumps(deck_to_dict(deck), indent=2, ensure_ascii=False))
    return 0


def cmd_notetype(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the note type defined on a page."""
    path = parse_path(args.title, rt.project)

    async def _get():
        return await rt.cache.get_note_type(path)

    try:
        note_type = asyncio.run(_get())
    except Scrapbox2AnkiError as e:
        print(f"{e.name}: {e.message}", file=sys.stderr)
        return 1
    print(json.dumps(note_type_to_dict(note_type), indent=2, ensure_ascii=False))
    return 0


def _version_text() -> str:
    return (
        f"scrapbox2anki {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform()})"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s2a", description="Convert Scrapbox pages to Anki notes"
    )
    parser.add_argument("--version", action="version", version=_version_text())
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/s2a.toml, pages/s2a.toml)",
    )
    parser.add_argument(
        "--pages",
        type=Path,
        default=None,
        help="Path to the page dumps directory (overrides config)",
    )
    parser.add_argument(
        "--project", default=None, help="Scrapbox project name (overrides config)"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # notes command
    parser_notes = subparsers.add_parser("notes", help="Convert pages to notes")
    parser_notes.add_argument(
        "titles", nargs="*", help="Page titles (default: every page of the project)"
    )
    parser_notes.add_argument(
        "--since", type=int, default=None, help="Only pages updated at or after EPOCH"
    )
    parser_notes.add_argument(
        "--out", type=Path, default=None, help="Output file (overrides config)"
    )
    parser_notes.add_argument(
        "-y", "--yes", action="store_true", help="Do not ask before writing"
    )
    parser_notes.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    # deck command
    parser_deck = subparsers.add_parser("deck", help="Show the deck defined on a page")
    parser_deck.add_argument("title", help="Page title or /project/title")

    # notetype command
    parser_notetype = subparsers.add_parser(
        "notetype", help="Show the note type defined on a page"
    )
    parser_notetype.add_argument("title", help="Page title or /project/title")

    return parser


def _setup_logging(verbose: int, configured: str) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(configured)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    rt = build_runtime(
        pages_root=args.pages, config_path=args.config, project=args.project
    )
    _setup_logging(args.verbose, rt.config.log.level)

    handlers = {
        "notes": cmd_notes,
        "deck": cmd_deck,
        "notetype": cmd_notetype,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        return 1
    try:
        return handler(args, rt)
    except Scrapbox2AnkiError as e:
        print(f"Error: {e.name}: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
