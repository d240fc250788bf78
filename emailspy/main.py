"""Flask application setup and blueprint wiring."""

from __future__ import annotations

import atexit
from typing import Optional

from flask import Flask
from flask_cors import CORS

from emailspy.config import Config, load_config
from emailspy.routes import register_routes
from emailspy.storage import RATE_LIMITER_KEY, RESULT_STORE_KEY, SWEEPER_KEY, init_stores
from emailspy.utils.session import register_session_cookie
from emailspy.utils.sweeper import BackgroundSweeper

def create_app(
    config: Optional[Config] = None,
    *,
    result_store=None,
    rate_limiter=None,
) -> Flask:
    """Configure and return the Flask application instance."""
    config = config or load_config()

    app = Flask(__name__)
    CORS(
        app,
        resources={
            r"/api/*": {"origins": config.cors_origins},
            r"/callback/*": {"origins": config.cors_origins},
        },
        supports_credentials=config.cors_origins != "*",
    )

    app.config["MAX_CONTENT_LENGTH"] = config.max_request_bytes or None

    # Initialize MongoDB indexes if enabled
    if config.enable_mongodb:
        try:
            from emailspy import database

            atexit.register(database.close_mongo_connection)
            database.create_indexes()
            app.logger.info("MongoDB indexes created successfully")
        except Exception as e:
            app.logger.warning(f"Failed to create MongoDB indexes: {e}")

    init_stores(app, config, result_store=result_store, rate_limiter=rate_limiter)
    register_session_cookie(app)
    register_routes(app)

    sweeper = BackgroundSweeper(
        app.extensions[RESULT_STORE_KEY],
        app.extensions[RATE_LIMITER_KEY],
        interval_seconds=config.cleanup_interval_seconds,
    )
    app.extensions[SWEEPER_KEY] = sweeper
    if config.background_sweep:
        sweeper.start()

    return app
