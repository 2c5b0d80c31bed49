#!/usr/bin/env python
"""
Look up a PIPA tag (or a single report) from the command line and print
the resulting JSON record.

Usage:
    python -m pipa_lookup.scripts.lookup_tag 40000
    python -m pipa_lookup.scripts.lookup_tag 40000 --no-cache
    python -m pipa_lookup.scripts.lookup_tag 40000 --no-details
    python -m pipa_lookup.scripts.lookup_tag --report https://hub.pipa.org.uk/public/reports/report/<id>
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pipa_lookup.config import settings
from pipa_lookup.models.base import PipaModel
from pipa_lookup.pipelines.pipa_client import PipaClient
from pipa_lookup.services.cache import build_cache
from pipa_lookup.services.tag_lookup import TagLookupService

# Configure logging (stderr, so stdout stays pure JSON)
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


async def main(
    tag_id: Optional[str],
    use_cache: bool = True,
    include_details: bool = True,
    report_url: Optional[str] = None,
) -> PipaModel:
    async with PipaClient(config=settings) as client:
        if report_url:
            return await client.fetch_report(report_url)

        # Cache is written even when reads are skipped
        cache = build_cache(settings)
        try:
            service = TagLookupService(client, cache)
            return await service.search_tag_with_cache(
                tag_id or "",
                use_cache=use_cache,
                include_report_details=include_details,
            )
        finally:
            if cache is not None:
                cache.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Look up a PIPA playground equipment tag")
    parser.add_argument("tag_id", nargs="?", help="Numeric PIPA tag ID")
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore cached entries and fetch from pipa.org.uk (the result is still cached)",
    )
    parser.add_argument(
        "--no-details",
        action="store_true",
        help="Do not fetch each annual report's detail page",
    )
    parser.add_argument(
        "--report",
        metavar="URL",
        help="Fetch a single report page instead of a tag",
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.tag_id and not args.report:
        parser.error("a tag ID or --report URL is required")

    record = asyncio.run(
        main(
            args.tag_id,
            use_cache=not args.no_cache,
            include_details=not args.no_details,
            report_url=args.report,
        )
    )
    print(record.model_dump_json(by_alias=True, exclude_none=True, indent=2))
    return 0 if record.found else 1


if __name__ == "__main__":
    sys.exit(run())
