from typing import List
import argparse
import asyncio
import json
import logging
import sys

import aiohttp
import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

from social.graze.federation.app.config import get_settings
from social.graze.federation.resolve.discovery import DiscoveryError, discover
from social.graze.federation.resolve.fetcher import HttpFetcher

logger = logging.getLogger(__name__)


async def realMain() -> int:
    parser = argparse.ArgumentParser(
        prog="federation-resolve", description="Discover federation handles"
    )
    parser.add_argument("handle", nargs="+", help="The handle(s) to discover.")

    args = vars(parser.parse_args())

    handles: List[str] = args.get("handle", [])

    settings = get_settings()
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn, integrations=[AioHttpIntegration()])

    failures = 0
    async with aiohttp.ClientSession() as session:
        fetcher = HttpFetcher(session, settings)
        for handle in handles:
            try:
                person = await discover(fetcher, handle, settings)
                print(json.dumps(person.to_dict(), indent=2, default=str))
            except DiscoveryError:
                failures += 1
                logger.exception("Exception discovering handle %s", handle)
    return 1 if failures else 0


def main() -> None:
    sys.exit(asyncio.run(realMain()))


if __name__ == "__main__":
    from social.graze.federation.app.cli import invoke

    invoke()
