#!/usr/bin/env python3
# Discarr
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Discarr HTTP API.

Loads config, creates the output backend and the Jellyfin client, and
serves the playback commands:

    POST /play     {"source": "local"|"url"|"jellyfin", "path"|"url"|"jellyfinUrl": ...}
    POST /stop
    POST /pause
    POST /resume
    GET  /status   → {"state", "outputMode"}
    GET  /health   → {"status", "outputMode", "platform"}
    GET  /login    → PNG login QR code, or JSON after a credential login

Failures answer ``{"error": <kind>, "message": <text>}``.

Port: 3000 (server.port)
"""

import asyncio
import logging
import sys

from aiohttp import web

from .backends import create_backend
from .coordinator import SessionCoordinator
from .errors import DiscarrError, InvalidRequest
from .lib.config import cfg, load_config
from .lib.watchdog import sd_notify, watchdog_loop
from .sources import JellyfinClient, PlayRequest

logger = logging.getLogger("discarr")

DEFAULT_PORT = 3000

COORDINATOR = web.AppKey("coordinator", SessionCoordinator)
JELLYFIN = web.AppKey("jellyfin", JellyfinClient)
OUTPUT_MODE = web.AppKey("output_mode", str)
PLATFORM = web.AppKey("platform", str)
WATCHDOG = web.AppKey("watchdog", asyncio.Task)


# ---------------------------------------------------------------------------
# HTTP handlers
# ---------------------------------------------------------------------------
async def handle_play(request: web.Request) -> web.Response:
    """POST /play — resolve the source and start playback."""
    try:
        data = await request.json()
    except ValueError:
        raise InvalidRequest("invalid json") from None

    play_request = PlayRequest.from_json(data)
    uri = await request.app[COORDINATOR].play(play_request)
    return web.json_response({"status": "playing", "source": uri})


async def handle_stop(request: web.Request) -> web.Response:
    """POST /stop — stop the feeder and the stream.  Safe when idle."""
    await request.app[COORDINATOR].stop()
    return web.json_response({"status": "stopped"})


async def handle_pause(request: web.Request) -> web.Response:
    await request.app[COORDINATOR].pause()
    return web.json_response({"status": "paused"})


async def handle_resume(request: web.Request) -> web.Response:
    await request.app[COORDINATOR].resume()
    return web.json_response({"status": "playing"})


async def handle_status(request: web.Request) -> web.Response:
    """GET /status — current playback state."""
    return web.json_response({
        "state": request.app[COORDINATOR].status().value,
        "outputMode": request.app[OUTPUT_MODE],
    })


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({
        "status": "ok",
        "outputMode": request.app[OUTPUT_MODE],
        "platform": request.app[PLATFORM],
    })


async def handle_login(request: web.Request) -> web.Response:
    """GET /login — Discord login QR code (PNG) or credential login result."""
    kind, data = await request.app[COORDINATOR].login()
    if kind == "png":
        return web.Response(body=data, content_type="image/png")
    return web.json_response(data)


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------
@web.middleware
async def cors_middleware(request, handler):
    if request.method == "OPTIONS":
        resp = web.Response()
    else:
        resp = await handler(request)
    resp.headers["Access-Control-Allow-Origin"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    resp.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return resp


@web.middleware
async def error_middleware(request, handler):
    """Turn command failures into structured JSON errors."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except DiscarrError as e:
        logger.warning("%s %s failed: %s: %s", request.method, request.path, e.kind, e)
        return web.json_response(e.to_dict(), status=e.status)
    except Exception as e:
        logger.exception("%s %s failed", request.method, request.path)
        return web.json_response({"error": "InternalError", "message": str(e)}, status=500)


# ---------------------------------------------------------------------------
# App lifecycle
# ---------------------------------------------------------------------------
async def on_startup(app: web.Application):
    app[WATCHDOG] = asyncio.create_task(watchdog_loop())
    logger.info("Output mode: %s", app[OUTPUT_MODE])


async def on_cleanup(app: web.Application):
    logger.info("Shutting down...")
    sd_notify("STOPPING=1")
    watchdog = app.get(WATCHDOG)
    if watchdog:
        watchdog.cancel()
    await app[COORDINATOR].shutdown()
    if JELLYFIN in app:
        await app[JELLYFIN].close()


def create_app(coordinator: SessionCoordinator, output_mode: str, platform: str = "linux",
               jellyfin: JellyfinClient | None = None) -> web.Application:
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app[COORDINATOR] = coordinator
    app[OUTPUT_MODE] = output_mode
    app[PLATFORM] = platform
    if jellyfin is not None:
        app[JELLYFIN] = jellyfin
    app.router.add_post("/play", handle_play)
    app.router.add_post("/stop", handle_stop)
    app.router.add_post("/pause", handle_pause)
    app.router.add_post("/resume", handle_resume)
    app.router.add_get("/status", handle_status)
    app.router.add_get("/health", handle_health)
    app.router.add_get("/login", handle_login)
    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    return app


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    load_config()

    try:
        backend = create_backend()
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    jellyfin = JellyfinClient.from_config()
    if jellyfin.is_configured():
        logger.info("Jellyfin integration: %s", jellyfin.server_url)

    coordinator = SessionCoordinator(backend, cfg("videos", "path", default="/videos"), jellyfin)
    app = create_app(coordinator, backend.name, cfg("platform", default="linux"), jellyfin)
    web.run_app(
        app,
        host=cfg("server", "host", default="0.0.0.0"),
        port=int(cfg("server", "port", default=DEFAULT_PORT)),
        print=lambda msg: logger.info(msg),
    )


if __name__ == "__main__":
    main()
