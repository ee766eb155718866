#!/usr/bin/env python3
"""
Income Stream - Entry point for running the application.

Usage:
    python main.py                  # Run web server
    python main.py --port 5000      # Run web server on another port
    python main.py --init-catalog   # Seed the stock catalog and exit
"""

import argparse
import asyncio
import logging

import uvicorn

from income_stream.api.dependencies import get_common_deps
from income_stream.exceptions import ValidationError

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def init_catalog():
    """Connect, write default settings and load the initial stock catalog."""
    deps = await get_common_deps()
    await deps.db.connect()
    try:
        await deps.settings.init_defaults()
        count = await deps.stocks.initialize_catalog()
        logger.info(f"Initialized {count} stocks")
    except ValidationError as e:
        logger.warning(f"Catalog not initialized: {e.message} ({e.details.get('count')} stocks present)")
    finally:
        await deps.db.close()


def main():
    parser = argparse.ArgumentParser(description="Income Stream dividend portfolio tracker")
    parser.add_argument("--host", default="0.0.0.0", help="Web server host")
    parser.add_argument("--port", type=int, default=5000, help="Web server port")
    parser.add_argument("--init-catalog", action="store_true", help="Seed the stock catalog and exit")
    args = parser.parse_args()

    if args.init_catalog:
        asyncio.run(init_catalog())
        return

    # The database is connected by the app's lifespan so it lives on uvicorn's event loop.
    logger.info(f"Running web server on {args.host}:{args.port}")
    uvicorn.run("income_stream.app:app", host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
