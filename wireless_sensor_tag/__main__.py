"""Run the tag poller against a logging-only host."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal

from . import async_setup_platform, async_unload_platform
from .config import load_config
from .registry import LoggingAccessoryHost


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and poll until interrupted."""

    parser = argparse.ArgumentParser(prog="wireless-sensor-tag")
    parser.add_argument("--config", required=True, help="Path to YAML config")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)

    async def _main() -> None:
        stop = asyncio.Event()

        def _handle_stop(*_args: object) -> None:
            stop.set()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, _handle_stop)
            except NotImplementedError:
                pass

        runtime = await async_setup_platform(config, LoggingAccessoryHost())
        try:
            await stop.wait()
        finally:
            await async_unload_platform(runtime)

    asyncio.run(_main())


if __name__ == "__main__":
    main()
