from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from tableside.application.use_cases.order_page import encode_order_id
from tableside.client.gateway import HttpOrderGateway
from tableside.client.notifications import LoggingNavigator, LoggingNotifier
from tableside.client.state import OrderInfoStore
from tableside.client.sync_loop import OrderSyncLoop, SyncState
from tableside.infrastructure.observability.logging_config import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Follow one order the way the table view does.")
    parser.add_argument("order", help="Order id, or the base64 id from a table link with --encoded.")
    parser.add_argument("--encoded", action="store_true", help="Treat ORDER as already encoded.")
    parser.add_argument("--api-url", default=None, help="Defaults to TABLESIDE_API_URL.")
    parser.add_argument("--interval", type=float, default=None, help="Poll interval in seconds.")
    parser.add_argument("--ticks", type=int, default=0, help="Stop after N polls (0 runs forever).")
    return parser.parse_args(argv)


async def _follow(args: argparse.Namespace) -> int:
    gateway = HttpOrderGateway(base_url=args.api_url)
    navigator = LoggingNavigator()
    store = OrderInfoStore()
    loop = OrderSyncLoop(
        gateway=gateway,
        notifier=LoggingNotifier(),
        navigator=navigator,
        order_info=store.claim_writer(),
        poll_interval_seconds=args.interval,
    )
    encoded = args.order if args.encoded else encode_order_id(args.order)
    try:
        await loop.bootstrap(encoded)
        if loop.state == SyncState.REDIRECTED:
            print(f"redirected to {navigator.current}")
            return 1

        if args.ticks > 0:
            for _ in range(args.ticks):
                await loop.tick()
                await asyncio.sleep(loop.poll_interval_seconds)
        else:
            loop.start()
            await asyncio.Event().wait()
        return 0
    finally:
        await loop.stop()
        await gateway.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    args = _parse_args(argv)
    try:
        return asyncio.run(_follow(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
