import atexit
import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import Config
from core.database import Database
from core.redis_manager import CharacterLockManager
from economy.catalog import SqliteCatalog
from economy.economy_manager import EconomyEngine
from economy.errors import EconomyError
from game.systems.accounts import AccountService
from game.systems.characters import CharacterService
from routes.accounts import bp as accounts_bp
from routes.characters import bp as characters_bp
from routes.items import bp as items_bp

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


@dataclass
class GameServices:
    """Everything a request handler needs, built once per app."""
    db: Database
    locks: CharacterLockManager
    catalog: SqliteCatalog
    accounts: AccountService
    characters: CharacterService
    economy: EconomyEngine


def configure_logging(config: Mapping[str, Any]) -> None:
    """Set up logging with timestamps to the console and, optionally, a file."""
    handlers = [logging.StreamHandler()]
    if config.get("LOG_FILE"):
        handlers.append(logging.FileHandler(config["LOG_FILE"]))
    logging.basicConfig(
        level=config.get("LOG_LEVEL", "INFO"),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
    )


def build_services(config: Mapping[str, Any]) -> GameServices:
    """Open the database and wire the components together."""
    db = Database(config["DATABASE"], timeout=config["DB_TIMEOUT"])
    db.init_db()
    locks = CharacterLockManager(config.get("REDIS_URL"), timeout=config["CHARACTER_LOCK_TIMEOUT"])
    catalog = SqliteCatalog(db)
    admin_users = (config.get("ADMIN_USERS") or "").split(",")
    return GameServices(
        db=db,
        locks=locks,
        catalog=catalog,
        accounts=AccountService(db, admin_users=admin_users),
        characters=CharacterService(db, locks),
        economy=EconomyEngine(db, catalog, locks),
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(EconomyError)
    def handle_economy_error(e: EconomyError):
        return jsonify({"message": e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(sqlite3.Error)
    def handle_storage_error(e: sqlite3.Error):
        logger.exception(f"Storage failure: {e}")
        return jsonify({"message": "An internal error occurred. Please try again later."}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.exception(f"Unhandled error: {e}")
        return jsonify({"message": "An internal error occurred. Please try again later."}), 500


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        overrides: Config values that replace the environment defaults
            (tests pass a temporary DATABASE here)
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config)

    services = build_services(app.config)
    app.extensions["game"] = services

    @app.route(f"{API_PREFIX}/")
    def health():
        return jsonify({"message": "hello"})

    app.register_blueprint(accounts_bp, url_prefix=API_PREFIX)
    app.register_blueprint(characters_bp, url_prefix=API_PREFIX)
    app.register_blueprint(items_bp, url_prefix=API_PREFIX)
    register_error_handlers(app)

    logger.info(f"Economy server ready (database {app.config['DATABASE']}, "
                f"redis locks {'on' if app.config.get('REDIS_URL') else 'off'})")
    return app


if __name__ == '__main__':
    application = create_app()
    atexit.register(application.extensions["game"].locks.close)
    application.run(host='0.0.0.0', port=application.config["PORT"], threaded=True)
