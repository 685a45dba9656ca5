from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from aiohttp import web

from .config import load_config
from .runner import CoachRunner
from .server import build_app


def _setup_logging(level: str) -> None:
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


async def _run_once(runner: CoachRunner, pair: str, tf: str) -> int:
    try:
        payload = await runner.signal(pair, tf)
    finally:
        await runner.close()
    if payload is None:
        logging.getLogger("main").error("no candles pair=%s tf=%s", pair, tf)
        return 1
    payload.pop("candles", None)
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="FX Structure Coach - indicator and market-structure dashboard")
    p.add_argument("--config", default=None, help="Path to YAML config (defaults + env when omitted)")
    p.add_argument("--once", action="store_true", help="Print a single analysis as JSON and exit")
    p.add_argument("--pair", default=None, help="Pair for --once, e.g. EURUSD")
    p.add_argument("--tf", default=None, help="Interval for --once: 1min, 5min or 15min")
    args = p.parse_args(argv)

    cfg = load_config(args.config)
    _setup_logging(cfg.app.log_level)

    runner = CoachRunner(cfg)
    runner.startup_log()

    try:
        if args.once:
            return asyncio.run(_run_once(runner, args.pair, args.tf))
        web.run_app(build_app(runner), host=cfg.server.host, port=int(cfg.server.port))
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("main").exception("fatal err=%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
