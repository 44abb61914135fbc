"""Command-line entry point.

Usage::

    dascrape scrape --gazetteer data/ --db data.sqlite
    dascrape parse register.pdf --gazetteer data/
    dascrape normalize "LOT 5, 12 MAIN ST, PENOLA, HD COMAUM" --gazetteer data/
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .address import Gazetteer, load_gazetteer, normalize_address
from .config import UPSERT_POLICIES, ExtractionConfig
from .fetch import IndexFetcher, select_pdf_urls
from .pipeline import run_document
from .store import RecordStore

log = logging.getLogger("dascrape.cli")

DEFAULT_DB = Path("data.sqlite")


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--gazetteer",
        type=Path,
        default=None,
        help="Directory holding streetnames.txt, streetsuffixes.txt and suburbnames.txt",
    )
    common.add_argument(
        "--policy",
        choices=UPSERT_POLICIES,
        default="ignore",
        help="Duplicate handling when storing records (default: ignore)",
    )
    common.add_argument(
        "--no-deinterleave",
        action="store_true",
        default=False,
        help="Do not split addresses that interleave two variants",
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", default=False, help="Debug logging"
    )

    parser = argparse.ArgumentParser(
        prog="dascrape",
        description="Extract development applications from council PDF registers",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_scrape = sub.add_parser(
        "scrape", parents=[common], help="Fetch the council index and store records"
    )
    p_scrape.add_argument("--db", type=Path, default=DEFAULT_DB, help="SQLite file")
    p_scrape.add_argument(
        "--all",
        action="store_true",
        default=False,
        help="Process every listed PDF instead of the newest plus one sampled",
    )
    p_scrape.add_argument(
        "--limit", type=int, default=None, help="Process at most this many PDFs"
    )

    p_parse = sub.add_parser(
        "parse", parents=[common], help="Parse local PDFs and print records as JSON lines"
    )
    p_parse.add_argument("pdf", type=Path, nargs="+", help="Path to PDF")
    p_parse.add_argument("--db", type=Path, default=None, help="Also store records here")

    p_norm = sub.add_parser(
        "normalize", parents=[common], help="Print normalised addresses"
    )
    p_norm.add_argument("address", nargs="+")
    return parser


def _load(args: argparse.Namespace) -> Optional[Gazetteer]:
    if args.gazetteer is None:
        return None
    return load_gazetteer(args.gazetteer)


def _cmd_scrape(
    args: argparse.Namespace, settings: ExtractionConfig, gazetteer: Optional[Gazetteer]
) -> int:
    if gazetteer is None:
        log.error("scrape needs --gazetteer")
        return 2
    fetcher = IndexFetcher(settings)
    urls = fetcher.list_pdf_urls()
    if not urls:
        return 0
    selected = urls if args.all else select_pdf_urls(urls, fetcher.rng)
    if args.limit is not None:
        selected = selected[: args.limit]

    with RecordStore(args.db, settings.upsert_policy) as store:
        for url in selected:
            log.info("Parsing document: %s", url)
            result = run_document(
                fetcher.fetch_pdf(url), settings, gazetteer, info_url=url
            )
            log.info(
                "Parsed %d development application(s) from document: %s",
                len(result.records),
                url,
            )
            store.save_all(result.records)
    return 0


def _cmd_parse(
    args: argparse.Namespace, settings: ExtractionConfig, gazetteer: Optional[Gazetteer]
) -> int:
    if args.db and gazetteer is None:
        log.error("parse --db needs --gazetteer")
        return 2
    store = RecordStore(args.db, settings.upsert_policy) if args.db else None
    try:
        for pdf in args.pdf:
            result = run_document(
                pdf, settings, gazetteer, info_url=pdf.resolve().as_uri()
            )
            for record in result.records:
                print(json.dumps(record.to_dict()))
            if store is not None:
                store.save_all(result.records)
    finally:
        if store is not None:
            store.close()
    return 0


def _cmd_normalize(
    args: argparse.Namespace, settings: ExtractionConfig, gazetteer: Optional[Gazetteer]
) -> int:
    if gazetteer is None:
        log.error("normalize needs --gazetteer")
        return 2
    for address in args.address:
        print(normalize_address(address, gazetteer, settings))
    return 0


_COMMANDS = {
    "scrape": _cmd_scrape,
    "parse": _cmd_parse,
    "normalize": _cmd_normalize,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = ExtractionConfig(
            deinterleave_addresses=not args.no_deinterleave,
            upsert_policy=args.policy,
        )
        gazetteer = _load(args)
        status = _COMMANDS[args.command](args, settings, gazetteer)
    except Exception:
        log.exception("dascrape %s failed", args.command)
        return 1
    if status == 0:
        log.info("Complete.")
    return status


if __name__ == "__main__":
    sys.exit(main())
