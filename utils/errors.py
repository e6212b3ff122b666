from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from extensions import db


class AppError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ImportFormatError(ValidationError):
    """Roster file rejected before any write."""


class ReportPreconditionError(NotFoundError):
    """Student or period needed by a report cannot be resolved."""


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(exc):
        app.logger.info("%s: %s", type(exc).__name__, exc.message)
        return jsonify({"error": exc.message}), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        app.logger.exception("Database error")
        return jsonify({"error": "Erreur de la base de données, veuillez réessayer."}), 500
