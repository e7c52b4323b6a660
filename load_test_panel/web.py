"""HTTP routes exposing the load test operations to the control panel."""

import logging
from collections.abc import AsyncIterator
from functools import partial

from aiohttp import web
from aiohttp.typedefs import Handler

from load_test_panel.config import PanelSettings
from load_test_panel.errors import PanelError, ValidationError
from load_test_panel.orchestrator import LoadTestOrchestrator
from load_test_panel.providers.github_actions import GitHubActionsEngine

log = logging.getLogger(__name__)

ORCHESTRATOR_KEY = web.AppKey("orchestrator", LoadTestOrchestrator)

NO_CACHE_HEADERS = {"Cache-Control": "no-store"}

routes = web.RouteTableDef()


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Map panel errors to their HTTP status and hide everything else."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except PanelError as exc:
        log.warning("%s %s failed: %s", request.method, request.path, exc)
        return web.json_response({"error": str(exc)}, status=exc.http_status)
    except Exception:
        log.exception("Unhandled error serving %s %s", request.method, request.path)
        return web.json_response({"error": "Internal server error"}, status=500)


@routes.post("/api/trigger")
async def trigger(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be a JSON object") from exc

    response = await request.app[ORCHESTRATOR_KEY].trigger(payload)
    return web.json_response(response.to_json_dict())


@routes.get("/api/status/{test_id}")
async def status(request: web.Request) -> web.Response:
    result = await request.app[ORCHESTRATOR_KEY].get_status(
        request.match_info["test_id"]
    )
    return web.json_response(result.to_json_dict(), headers=NO_CACHE_HEADERS)


@routes.get("/api/history")
async def history(request: web.Request) -> web.Response:
    results = await request.app[ORCHESTRATOR_KEY].get_history()
    return web.json_response(
        {"tests": [result.to_json_dict() for result in results]},
        headers=NO_CACHE_HEADERS,
    )


@routes.post("/api/cancel/{test_id}")
async def cancel(request: web.Request) -> web.Response:
    response = await request.app[ORCHESTRATOR_KEY].cancel(request.match_info["test_id"])
    return web.json_response(response.to_json_dict())


async def _orchestrator_context(
    settings: PanelSettings, app: web.Application
) -> AsyncIterator[None]:
    """Keep one GitHub session open for the application lifetime."""
    async with GitHubActionsEngine.from_config(settings.github_config()) as engine:
        app[ORCHESTRATOR_KEY] = LoadTestOrchestrator(engine=engine, settings=settings)
        log.info(
            "Serving load tests for %s/%s", settings.github_owner, settings.github_repo
        )
        yield


def create_app(
    settings: PanelSettings, *, orchestrator: LoadTestOrchestrator | None = None
) -> web.Application:
    """Create the web application.

    Args:
        settings: Resolved panel settings
        orchestrator: Use this orchestrator instead of one backed by GitHub

    """
    app = web.Application(middlewares=[error_middleware])
    app.add_routes(routes)
    if orchestrator is not None:
        app[ORCHESTRATOR_KEY] = orchestrator
    else:
        app.cleanup_ctx.append(partial(_orchestrator_context, settings))
    return app
