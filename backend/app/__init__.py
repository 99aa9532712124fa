from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from app.config import Config
from app.errors import register_error_handlers
from app.extensions import init_mongo
from app.log import configure_logging

bcrypt = Bcrypt()
jwt = JWTManager()


def create_app(config_class=Config, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    configure_logging(app)

    # Allow the browser client to talk to Flask
    CORS(
        app,
        supports_credentials=True,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}
    )
    # Init extensions
    init_mongo(app, client=mongo_client)
    bcrypt.init_app(app)
    jwt.init_app(app)
    register_jwt_handlers(jwt)
    register_error_handlers(app)

    # Register blueprints
    from app.auth.routes import auth_bp
    from app.users.routes import users_bp
    from app.expenses.routes import expenses_bp, categories_bp
    from app.dashboards.routes import bp as dashboards_bp

    app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')
    app.register_blueprint(users_bp, url_prefix='/api/v1/users')
    app.register_blueprint(expenses_bp, url_prefix='/api/v1/expenses')
    app.register_blueprint(categories_bp, url_prefix='/api/v1/categories')
    app.register_blueprint(dashboards_bp, url_prefix='/api/v1/dashboards')

    @app.route("/api/v1/health")
    def health():
        return jsonify({"status": "ok"})

    return app


def register_jwt_handlers(manager):
    """Answer every token problem with the same 401 body."""
    from app.auth.services import AuthService

    def unauthenticated(message):
        return jsonify({"error": "unauthenticated", "message": message}), 401

    @manager.token_in_blocklist_loader
    def token_revoked(jwt_header, jwt_payload):
        return AuthService.is_token_revoked(jwt_payload["jti"])

    @manager.unauthorized_loader
    def missing_token(reason):
        return unauthenticated(reason)

    @manager.invalid_token_loader
    def invalid_token(reason):
        return unauthenticated(reason)

    @manager.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return unauthenticated("Token has expired")

    @manager.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return unauthenticated("Token has been revoked")
