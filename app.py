import logging

from flask import Flask, jsonify
from flask_migrate import Migrate

from config.config import Config
from extensions import db, login_manager

# Route Imports
from routes.auth_routes import auth_bp
from routes.admin_routes import admin_bp
from routes.class_routes import class_bp
from routes.periode_routes import periode_bp
from routes.evaluation_routes import evaluation_bp
from routes.report_routes import report_bp

# Model Imports (registers every table with the metadata)
from models import User, Classe, Eleve, PeriodeStage, Evaluation  # noqa: F401
from utils.errors import register_error_handlers
from utils.seed_data import run_seed

migrate = Migrate()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Authentification requise"}), 401

    # Register Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(class_bp)
    app.register_blueprint(periode_bp)
    app.register_blueprint(evaluation_bp)
    app.register_blueprint(report_bp)

    register_error_handlers(app)

    @app.cli.command("seed")
    def seed():
        """Create the initial admin account and the demo period."""
        run_seed()

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)
