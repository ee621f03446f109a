"""aiohttp application: /auth and /healthz endpoints plus an API key middleware."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from aiohttp import web

from keygate.auth import SCHEME, ErrorKind, extract

log = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def mask_key(key: str) -> str:
    """Return the last 4 characters of the key for log lines.

    Keys of 4 characters or fewer are hidden entirely.
    """
    if not key:
        return ""
    if len(key) <= 4:
        return "..."
    return "..." + key[-4:]


def _status_for(config: dict[str, Any], kind: ErrorKind) -> int:
    codes = config["auth"]["status_codes"]
    return int(codes.get(kind.name.lower(), 401))


def _reject(config: dict[str, Any], kind: ErrorKind) -> web.Response:
    status = _status_for(config, kind)
    headers = {"WWW-Authenticate": SCHEME} if status == 401 else None
    return web.Response(status=status, text=kind.message, headers=headers)


async def healthz(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def auth(request: web.Request) -> web.Response:
    config: dict[str, Any] = request.app["config"]
    result = extract(request.headers)
    if not result.ok:
        log.info("Rejected %s: %s", request.path, result.error.name)
        return _reject(config, result.error)
    log.debug("Extracted key %s for %s", mask_key(result.key), request.path)
    forward_header = config["auth"]["forward_header"]
    return web.Response(status=200, text="ok", headers={forward_header: result.key})


def api_key_middleware(config: dict[str, Any]) -> Callable:
    """Build a middleware storing the extracted key in request["api_key"].

    Paths listed in auth.public_paths pass through untouched.
    """
    paths = config["auth"]["public_paths"]
    if isinstance(paths, str):
        paths = [paths]
    public_paths = frozenset(paths)

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if request.path in public_paths:
            return await handler(request)
        result = extract(request.headers)
        if not result.ok:
            log.info("Rejected %s: %s", request.path, result.error.name)
            return _reject(config, result.error)
        request["api_key"] = result.key
        return await handler(request)

    return middleware


def create_app(config: dict[str, Any], middleware: bool = False) -> web.Application:
    """Create the auth sidecar app.

    With middleware=True every non-public route requires an ApiKey header,
    which is how a hosting application would mount the extractor.
    """
    middlewares = [api_key_middleware(config)] if middleware else []
    app = web.Application(middlewares=middlewares)
    app["config"] = config

    app.router.add_get("/auth", auth)
    app.router.add_get("/healthz", healthz)
    return app
