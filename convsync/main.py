"""Entry point: starts the conversation sync server."""

from __future__ import annotations

from aiohttp import web

from convsync.api.routes import ENGINE_KEY, STORE_KEY, add_routes
from convsync.capture.client import CaptureServiceClient
from convsync.config import Settings, settings
from convsync.conversations import ConversationStore
from convsync.sync.engine import SyncEngine
from convsync.utils.logging import get_logger, setup_logging

CLIENT_KEY = web.AppKey("capture_client", CaptureServiceClient)


async def on_startup(app: web.Application) -> None:
    log = get_logger(__name__)
    app[ENGINE_KEY].start()
    log.info("server_started", port=settings.server_port)


async def on_shutdown(app: web.Application) -> None:
    log = get_logger(__name__)
    await app[ENGINE_KEY].stop()
    client = app.get(CLIENT_KEY)
    if client is not None:
        await client.close()
    log.info("server_stopped")


def create_app(source=None, config: Settings | None = None) -> web.Application:
    """Build the web app around a sync engine.

    ``source`` supplies transcripts and mic activity; by default an HTTP client
    for the configured capture service is created and closed with the app.
    """
    config = config or settings
    setup_logging(config.log_level)
    app = web.Application()

    if source is None:
        source = CaptureServiceClient(
            config.capture_service_url, config.transcript_duration_seconds
        )
        app[CLIENT_KEY] = source

    store = ConversationStore()
    app[STORE_KEY] = store
    app[ENGINE_KEY] = SyncEngine(
        source,
        add_conversation=store.add,
        config=config,
        on_delete_conversation=store.delete,
        on_update_conversation=store.update,
    )

    # Lifecycle
    app.on_startup.append(on_startup)
    app.on_shutdown.append(on_shutdown)

    add_routes(app)
    return app


def main() -> None:
    app = create_app()
    web.run_app(app, host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()
