"""
Minimal status dashboard served next to the bot
"""

from aiohttp import web

from ..core.logging import get_logger

logger = get_logger("dashboard")

CLIENT_KEY = web.AppKey("client", object)


async def index(request: web.Request) -> web.Response:
    stats = request.app[CLIENT_KEY].get_stats()
    return web.Response(
        text=f"{stats['user'] or 'nexusbot'} is {stats['state']} | uptime {stats['uptime']}"
    )


async def status(request: web.Request) -> web.Response:
    return web.json_response(request.app[CLIENT_KEY].get_stats())


def create_app(client) -> web.Application:
    app = web.Application()
    app[CLIENT_KEY] = client
    app.router.add_get("/", index)
    app.router.add_get("/api/status", status)
    return app


async def launch_dashboard(client) -> web.AppRunner:
    """Start the dashboard server and attach its runner to ``client``

    ``client.close()`` tears the runner down.
    """
    settings = client.config.dashboard
    runner = web.AppRunner(create_app(client))
    try:
        await runner.setup()
        site = web.TCPSite(runner, settings.host, settings.port)
        await site.start()
    except BaseException:
        # Also reached on cancellation, so a timed-out launch frees its socket
        await runner.cleanup()
        raise

    client.dashboard = runner
    logger.info(f"Dashboard listening on {settings.host}:{settings.port} ({settings.base_url})")
    return runner
