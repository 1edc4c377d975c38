"""Protean Engine runner for FreshCart.

Starts the Engine that processes events asynchronously:
- OutboxProcessor: polls the outbox table, publishes events to the broker
- StreamSubscriptions: reads the broker, invokes the event handlers that
  turn ordering events into notifications and push them

Needed when the API runs with ``PROTEAN_ENV=production``; in the test and
development overlays events are handled in-process right after commit.

Usage:
    python src/server.py
    python src/server.py --test-mode   # Process what is pending and exit
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine

from freshcart.domain import freshcart

logger = structlog.get_logger(__name__)


async def run(test_mode: bool = False):
    freshcart.init()
    engine = Engine(freshcart, test_mode=test_mode)
    logger.info("engine_started", domain=freshcart.name, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="FreshCart Engine runner")
    parser.add_argument("--test-mode", action="store_true", help="Process pending work once and exit")
    args = parser.parse_args()

    try:
        asyncio.run(run(test_mode=args.test_mode))
    except KeyboardInterrupt:
        logger.info("engine_stopped")


if __name__ == "__main__":
    main()
