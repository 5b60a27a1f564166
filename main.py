#!/usr/bin/env python3
"""
Entry point for the Chiya ordering platform

  init-db [--seed]   create tables, optionally with the demo shop and menu
  monitor SLUG       follow a shop's orders and alert on new ones
"""

import argparse
import asyncio
import logging
import signal
import sys

from dotenv import load_dotenv

from chiya.application.state import Ref
from chiya.application.use_cases.order_sync_use_case import (
    AdminOrderList,
    OrderSyncUseCase,
)
from chiya.container import get_container
from chiya.infrastructure.configuration.config import get_config
from chiya.infrastructure.database.operations import init_db
from chiya.infrastructure.logging.logging_config import setup_logging
from chiya.infrastructure.utilities.exceptions import ChiyaError, ErrorReporter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chiya restaurant ordering platform")
    subcommands = parser.add_subparsers(dest="command", required=True)

    init_parser = subcommands.add_parser("init-db", help="Create database tables")
    init_parser.add_argument(
        "--seed", action="store_true", help="Insert the demo shop and menu"
    )

    monitor_parser = subcommands.add_parser(
        "monitor", help="Follow a shop's orders and alert on new ones"
    )
    monitor_parser.add_argument("slug", help="Shop slug")
    return parser


async def run_monitor(slug: str) -> int:
    """Mirror a shop's orders until interrupted"""
    container = get_container()
    shop_response = await container.get_shop_settings_use_case().load_shop_by_slug(slug)
    if not shop_response.success:
        logger.error("💥 %s", shop_response.error_message)
        await container.cleanup()
        return 1

    shop = shop_response.shop
    if container.get_config().realtime_backend == "memory":
        logger.warning("⚠️ In-memory change feed only sees orders placed by this process")
    orders = AdminOrderList()
    sync = OrderSyncUseCase(
        container.get_order_repository(),
        container.get_change_feed(),
        Ref(shop),
        admin_orders=orders,
        alert_sinks=container.get_alert_sinks(),
        order_list_limit=container.get_config().order_list_limit,
        currency=container.get_config().currency,
    )

    started = await sync.start(shop.id)
    if not started.success:
        logger.error("💥 Could not start monitor: %s", started.error_message)
        await container.cleanup()
        return 1

    logger.info(
        "👀 MONITORING %s: %d orders loaded, waiting for changes", shop.slug, len(orders)
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            logger.debug("Signal handlers unavailable on this platform")

    try:
        await stop_event.wait()
    finally:
        await sync.stop()
        await container.cleanup()
        logger.info("👋 Monitor stopped")
    return 0


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    setup_logging(get_config())

    try:
        if args.command == "init-db":
            init_db(get_container().get_db_manager(), seed=args.seed)
            return 0
        if args.command == "monitor":
            return asyncio.run(run_monitor(args.slug))
    except ChiyaError as e:
        ErrorReporter.report_critical_error(e)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
