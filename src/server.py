"""Protean Engine runner for the storefront domain.

Only needed when event_processing is "async" (the production overlay): the
Engine picks up order events and runs the notification handlers.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import argparse
import asyncio

from protean.server.engine import Engine


async def run(test_mode: bool):
    from storefront.domain import storefront

    storefront.init()
    engine = Engine(storefront, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Storefront Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Drain pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(args.test_mode))


if __name__ == "__main__":
    main()
