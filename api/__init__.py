from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from auth.context import AuthContext
from auth.settings import Clock, TokenSettings
from models import build_store
from models.credential_store import CredentialStore
from utils.logging_config import setup_logging

__version__ = "1.0.0"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Refresh Auth API",
        "version": __version__,
        "description": "Access/refresh token authentication with refresh token rotation.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(
    config_name: str | None = None,
    config_overrides: dict | None = None,
    store: CredentialStore | None = None,
    clock: Clock | None = None,
) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    The credential store and clock can be injected (tests); otherwise the
    store is built from CREDENTIAL_STORE / DATABASE_URL.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Credentialed CORS for the configured front-end origin(s)
    origins = [o.strip() for o in str(app.config["CORS_ORIGINS"]).split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    if store is None:
        store = build_store(app.config["CREDENTIAL_STORE"], app.config["DATABASE_URL"])
    settings = TokenSettings.from_config(app.config, clock=clock)
    app.extensions["auth"] = AuthContext.build(settings, store)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .protected import bp as protected_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(protected_bp)

    # Release the store's per-request resources (scoped session for SQL)
    @app.teardown_appcontext
    def remove_session(exception=None):
        store.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Refresh Auth API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
