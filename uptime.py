import asyncio
import logging

from quart import Quart

app = Quart(__name__)


@app.get("/")
async def index():
    return "Bot is running!"


def start(port: int, stop_event: asyncio.Event) -> asyncio.Task:
    """Serve the liveness endpoint on the running loop until ``stop_event`` is set."""
    logging.info("Uptime server running on port %s", port)
    return asyncio.get_running_loop().create_task(
        app.run_task(host="0.0.0.0", port=port, shutdown_trigger=stop_event.wait)
    )
