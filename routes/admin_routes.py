from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from services.auth_service import create_account, delete_account, list_accounts, update_account
from services.data_access import user_service
from utils.decorators import admin_required

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


# =========================================================
# ACCOUNT MANAGEMENT
# =========================================================
@admin_bp.route("/users")
@admin_required
def list_users():
    users = list_accounts(role=request.args.get("role"), search=request.args.get("q"))
    return jsonify({"status": "success", "data": [u.to_document() for u in users]})


@admin_bp.route("/users/<user_id>")
@admin_required
def get_user(user_id):
    return jsonify(user_service.get_or_404(user_id).to_document())


@admin_bp.route("/users", methods=["POST"])
@admin_required
def create_user():
    user_id = create_account(request.get_json(silent=True) or {})
    current_app.logger.info("Account %s created by %s", user_id, current_user.email)
    return jsonify({"status": "success", "id": user_id}), 201


@admin_bp.route("/users/<user_id>", methods=["PUT", "PATCH"])
@admin_required
def update_user(user_id):
    update_account(user_id, request.get_json(silent=True) or {})
    return jsonify({"status": "success", "id": user_id})


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id):
    delete_account(user_id, current_user.id)
    current_app.logger.info("Account %s deleted by %s", user_id, current_user.email)
    return jsonify({"status": "success"})
