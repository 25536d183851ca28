"""
API gateway: wires the stores, services and blueprints into one Flask app.
This is the local entrypoint for development.
"""

import logging
from typing import Optional, Tuple

from flask import Flask, Response, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from workshop_portal.auth_service.routes import create_user_blueprint
from workshop_portal.auth_service.service import UserService
from workshop_portal.auth_service.store import UserStore
from workshop_portal.auth_service.utils import AuthGate, TokenService
from workshop_portal.config import Settings
from workshop_portal.database.db_connection import connector
from workshop_portal.errors import PortalError
from workshop_portal.workshops_service.routes import create_workshop_blueprint
from workshop_portal.workshops_service.service import WorkshopService
from workshop_portal.workshops_service.store import WorkshopStore

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(message)s"


def register_error_handlers(app: Flask) -> None:
    """Render every failure as JSON `{"message": ...}`."""

    @app.errorhandler(PortalError)
    def portal_error(error: PortalError) -> Tuple[Response, int]:
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException) -> Tuple[Response, int]:
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def unexpected_error(error: Exception) -> Tuple[Response, int]:
        logging.exception("Unhandled error while serving request")
        return jsonify({"message": "Error", "payload": str(error)}), 500


def create_app(
    settings: Optional[Settings] = None,
    user_store: Optional[UserStore] = None,
    workshop_store: Optional[WorkshopStore] = None,
) -> Flask:
    """
    Application factory.

    The stores are built once here (or injected, e.g. by tests) and handed
    to the auth gate and both services.

    Raises:
        RuntimeError: No DATABASE_URL while a store still has to be built.
    """
    settings = settings or Settings.from_env()

    if user_store is None or workshop_store is None:
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")
        connect = connector(settings.database_url)
        user_store = user_store or UserStore(connect)
        workshop_store = workshop_store or WorkshopStore(connect)

    tokens = TokenService(settings.jwt_secret, settings.token_expiration_minutes)
    gate = AuthGate(tokens, user_store)
    user_service = UserService(user_store, tokens)
    workshop_service = WorkshopService(
        workshop_store,
        user_store,
        require_create_access=settings.require_create_access,
    )

    app = Flask(__name__)
    app.json.sort_keys = False
    CORS(app, resources={
        r"/*": {
            "origins": settings.cors_origins,
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(create_user_blueprint(user_service, gate), url_prefix="/userApi")
    app.register_blueprint(create_workshop_blueprint(workshop_service, gate), url_prefix="/workshopApi")
    register_error_handlers(app)
    logging.info("All blueprints registered successfully.")

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    app = create_app(settings)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
