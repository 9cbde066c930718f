from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from tqdm import tqdm

from .config import SourceConfig
from .errors import BlockedBySource, MalformedResponse, TransportError
from .source import NovaSource
from .urls import SITE

EXIT_BLOCKED = 2
EXIT_MALFORMED = 3
EXIT_TRANSPORT = 4


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--site", default=SITE)
    p.add_argument("--timeout", type=int, default=45)
    p.add_argument("--max-retries", type=int, default=4)
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nova-extract")
    sub = parser.add_subparsers(dest="cmd", required=True)

    popular_p = sub.add_parser("popular", help="List the catalogue")
    popular_p.add_argument("--page", type=int, default=1)
    _add_common_args(popular_p)

    search_p = sub.add_parser("search", help="Search the catalogue")
    search_p.add_argument("term")
    search_p.add_argument("--page", type=int, default=1)
    _add_common_args(search_p)

    novel_p = sub.add_parser("novel", help="Print a novel's metadata + chapters")
    novel_p.add_argument("path", help="Site-relative path, e.g. /index.php/...")
    _add_common_args(novel_p)

    chapter_p = sub.add_parser("chapter", help="Print a sanitized chapter body")
    chapter_p.add_argument("path")
    _add_common_args(chapter_p)

    dump_p = sub.add_parser(
        "dump",
        help=(
            "Print a novel followed by every chapter body as JSON Lines "
            "on stdout"
        ),
    )
    dump_p.add_argument("path")
    _add_common_args(dump_p)

    return parser


def build_source(args: argparse.Namespace) -> NovaSource:
    cfg = SourceConfig(
        site=args.site,
        timeout_s=int(args.timeout),
        max_retries=int(args.max_retries),
    )
    return NovaSource.from_config(cfg)


def _emit(obj: Any) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _run(args: argparse.Namespace, source: NovaSource) -> int:
    if args.cmd == "popular":
        _emit([e.to_dict() for e in source.popular_novels(args.page)])
        return 0

    if args.cmd == "search":
        _emit([e.to_dict() for e in source.search_novels(args.term, args.page)])
        return 0

    if args.cmd == "novel":
        _emit(source.parse_novel(args.path).to_dict())
        return 0

    if args.cmd == "chapter":
        print(source.parse_chapter(args.path))
        return 0

    if args.cmd == "dump":
        novel = source.parse_novel(args.path)
        print(json.dumps({"novel": novel.to_dict()}, ensure_ascii=False))
        for chapter in tqdm(novel.chapters, desc="chapters", file=sys.stderr):
            body = source.parse_chapter(chapter.path)
            print(
                json.dumps(
                    {"chapter": chapter.to_dict(), "content": body},
                    ensure_ascii=False,
                )
            )
        return 0

    return 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    source = build_source(args)
    try:
        return _run(args, source)
    except BlockedBySource as e:
        print(f"{e} ({e.url})", file=sys.stderr)
        return EXIT_BLOCKED
    except MalformedResponse as e:
        print(str(e), file=sys.stderr)
        return EXIT_MALFORMED
    except TransportError as e:
        print(str(e), file=sys.stderr)
        return EXIT_TRANSPORT
