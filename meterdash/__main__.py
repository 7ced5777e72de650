"""Run the metering dashboard: poll the readings endpoint and keep an HTML page current."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

import httpx

from . import charts, config, exceptions, utils
from .orchestrator import RefreshOrchestrator

logger = logging.getLogger("meterdash")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="meterdash", description=__doc__)
    p.add_argument("--url", help="Readings endpoint (default: $METERDASH_API_URL)")
    p.add_argument("--tz", help="Zone for calendar-day bucketing (default: UTC)")
    p.add_argument("--interval", type=float, help="Refresh period in seconds (default: 60)")
    p.add_argument("--output", help="HTML file to write after each render")
    p.add_argument("--day", help="Show this day (YYYY-MM-DD) instead of the latest")
    p.add_argument("--week", help="Show the ISO week starting on this date")
    p.add_argument("--once", action="store_true", help="Load and render once, then exit")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> config.DashboardConfig:
    cfg = config.from_env()
    overrides = {
        "api_url": args.url,
        "tz": args.tz,
        "refresh_interval_sec": args.interval,
        "output_path": args.output,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(cfg, key, value)
    return cfg.validated()


async def _main(args: argparse.Namespace, cfg: config.DashboardConfig) -> int:
    renderer = charts.PlotlyRenderer()

    def write_page(orch: RefreshOrchestrator) -> None:
        renderer.heading = orch.week_range_label
        renderer.write_html(cfg.output_path)

    async with httpx.AsyncClient(timeout=cfg.request_timeout_sec) as client:
        orch = RefreshOrchestrator(
            cfg, client, charts.ChartRegistry(renderer), on_render=write_page
        )
        if args.day:
            orch.selected_day = args.day
        elif args.week:
            orch.selected_week = args.week

        if args.once:
            return 0 if await orch.load() else 1

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except NotImplementedError:
                pass
        await orch.run(stop)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = build_config(args)
        for d in (args.day, args.week):
            if d:
                utils.parse_date_str(d)
    except (exceptions.ConfigError, exceptions.FilterError) as e:
        logger.error("%s", e)
        return 2
    return asyncio.run(_main(args, cfg))


if __name__ == "__main__":
    sys.exit(main())
