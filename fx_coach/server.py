from __future__ import annotations

import json
import logging

from aiohttp import web

from .dashboard import DASHBOARD_HTML
from .runner import CoachRunner

log = logging.getLogger("server")

RUNNER_KEY = web.AppKey("runner", CoachRunner)


def _json_error(status: int, error: str, details: str = "") -> web.Response:
    body = {"error": error}
    if details:
        body["details"] = details
    return web.json_response(body, status=status)


async def index(request: web.Request) -> web.Response:
    return web.Response(text=DASHBOARD_HTML, content_type="text/html")


async def signal(request: web.Request) -> web.Response:
    runner = request.app[RUNNER_KEY]
    pair = request.query.get("pair")
    tf = request.query.get("tf")
    try:
        payload = await runner.signal(pair, tf)
    except Exception as e:
        log.exception("signal_failed pair=%s tf=%s err=%s", pair, tf, e)
        return _json_error(500, "Unable to fetch candle data", str(e))
    if payload is None:
        return _json_error(500, "Unable to fetch candle data")
    return web.json_response(payload)


async def ai_insight(request: web.Request) -> web.Response:
    runner = request.app[RUNNER_KEY]
    if not runner.commentator.enabled():
        return _json_error(400, "OPENAI_API_KEY is not set in the environment.")

    try:
        payload = await request.json()
    except json.JSONDecodeError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    try:
        text = await runner.ai_insight(payload)
    except Exception as e:
        log.warning("ai_insight_failed err=%s", e)
        return _json_error(500, "Error while calling the AI commentary service", str(e))
    return web.json_response({"ai_comment": text})


async def _on_cleanup(app: web.Application) -> None:
    await app[RUNNER_KEY].close()


def build_app(runner: CoachRunner) -> web.Application:
    app = web.Application()
    app[RUNNER_KEY] = runner
    app.router.add_get("/", index)
    app.router.add_get("/signal", signal)
    app.router.add_post("/ai_insight", ai_insight)
    app.on_cleanup.append(_on_cleanup)
    return app
