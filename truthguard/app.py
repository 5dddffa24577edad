from __future__ import annotations

import asyncio
import logging
import signal
import threading
from typing import Callable
from wsgiref.simple_server import WSGIServer, make_server

from flask import Flask
from flask_cors import CORS

from truthguard.api.routes import api
from truthguard.config.logging import setup_logging
from truthguard.config.settings import Settings, load_settings
from truthguard.processors.synthesizer import ContentSynthesizer
from truthguard.storage.session_history import SessionHistoryStore

logger = logging.getLogger(__name__)


def create_flask_app(
    settings: Settings,
    synthesizer: ContentSynthesizer,
    history: SessionHistoryStore,
) -> Flask:
    app = Flask(__name__)
    CORS(
        app,
        resources={r"/*": {"origins": settings.cors_origin}},
        supports_credentials=True,
    )

    app.config["SECRET_KEY"] = settings.secret_key
    app.config["SETTINGS"] = settings
    app.config["SYNTHESIZER"] = synthesizer
    app.config["HISTORY"] = history

    app.register_blueprint(api)
    return app


def build_synthesizer(settings: Settings) -> ContentSynthesizer:
    if settings.test_mode:
        return ContentSynthesizer(min_delay=0.0, max_delay=0.0)
    return ContentSynthesizer(
        min_delay=settings.min_delay_seconds,
        max_delay=settings.max_delay_seconds,
    )


async def run_flask(server: WSGIServer) -> None:
    host, port = server.server_address[:2]
    logger.info("Flask server starting on http://%s:%d", host, port)
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, server.serve_forever)
    finally:
        server.server_close()
        logger.info("Flask server stopped")


def make_shutdown_handler(server: WSGIServer) -> Callable[[int, object], None]:
    """Signal handler that stops ``serve_forever`` so the event loop can finish."""

    def _shutdown(sig: int, _frame: object) -> None:
        logger.info("Received signal %s, shutting down...", sig)
        # shutdown() blocks until serve_forever returns; keep the main thread free
        threading.Thread(target=server.shutdown, daemon=True).start()

    return _shutdown


async def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level_value, settings.log_file)
    logger.info("Starting TruthGuard...")

    synthesizer = build_synthesizer(settings)
    history = SessionHistoryStore(
        capacity=settings.history_capacity,
        max_sessions=settings.max_sessions,
    )
    app = create_flask_app(settings, synthesizer, history)

    if settings.test_mode:
        logger.info("Running in test mode: simulated analysis delay disabled")

    server = make_server(settings.host, settings.port, app)
    shutdown = make_shutdown_handler(server)
    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        await run_flask(server)
    except Exception as exc:
        logger.error("Main loop error: %s", exc)
        raise


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
