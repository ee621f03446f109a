"""keygate entry point: parse CLI flags, load config, start the auth sidecar.

Usage:
    python -m keygate [--config PATH] [--port PORT] [--protect-all]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from keygate.config import load_config
from keygate.server import create_app

log = logging.getLogger("keygate")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ApiKey Authorization header sidecar")
    parser.add_argument("--config", type=Path, help="YAML config file (default: config/keygate.yaml)")
    parser.add_argument("--port", type=int, help="Override server.port")
    parser.add_argument(
        "--protect-all",
        action="store_true",
        help="Require an ApiKey header on every non-public route",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    from aiohttp import web

    args = _parse_args(argv)
    config = load_config(args.config)
    if args.port is not None:
        config["server"]["port"] = args.port

    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    app = create_app(config, middleware=args.protect_all)
    log.info(
        "Forwarding extracted keys in %s, public paths: %s",
        config["auth"]["forward_header"],
        ", ".join(config["auth"]["public_paths"]) or "none",
    )
    web.run_app(app, host=config["server"]["host"], port=config["server"]["port"])


if __name__ == "__main__":
    main()
