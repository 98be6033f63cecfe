import atexit
import sys

from flask import Flask, jsonify
from loguru import logger

from . import config as default_config
from .controllers.bookings import bp as bookings_bp
from .controllers.favorites import bp as favorites_bp
from .controllers.vehicles import bp as vehicles_bp
from .exceptions import RentalError
from .models.store import DocumentStore, MemoryStore
from .services.identity import SessionIdentity
from .services.registry import EXTENSION_KEY, build_services


def _configure_logging(app: Flask):
    logger.remove()
    logger.add(sys.stderr, level=app.config["LOG_LEVEL"])
    if app.config.get("LOG_FILE"):
        logger.add(app.config["LOG_FILE"], level=app.config["LOG_LEVEL"],
                   rotation="10 MB", compression="zip")


def create_app(config: dict | None = None, store: DocumentStore | None = None):
    app = Flask(__name__)
    app.config.update(default_config.as_dict())
    app.config.update(config or {})
    _configure_logging(app)

    if store is None:
        store = MemoryStore(app.config.get("DATA_PATH") or None)
        # Automatically save on exit (skipped in test environments)
        if app.config.get("APP_ENV") != "test" and store.path:
            atexit.register(store.save)

    app.extensions[EXTENSION_KEY] = build_services(
        store, identity=SessionIdentity(), tz=app.config["DISPLAY_TIMEZONE"])

    app.register_blueprint(vehicles_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(favorites_bp)

    @app.errorhandler(RentalError)
    def handle_rental_error(err: RentalError):
        if err.status_code >= 500:
            logger.error("{}: {}", err.kind, err.message)
        return jsonify(error=err.kind, message=err.message), err.status_code

    logger.info("motorent app created (env={}, store={})", app.config["APP_ENV"], type(store).__name__)
    return app
