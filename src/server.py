"""Protean Engine runner for the bakery domain.

Processes events asynchronously in production (projections and the
notification handlers). In the test environment events are handled
synchronously and this runner is not needed.

Usage:
    python src/server.py
    python src/server.py --test-mode   # Drain pending events and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


async def run(test_mode=False):
    from bakery.domain import bakery

    bakery.init()
    engine = Engine(bakery, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Crumb & Co. Engine runner")
    parser.add_argument("--test-mode", action="store_true", help="Process pending events and exit")
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
