from flask import Blueprint, jsonify, request
from flask_login import login_required

from services.data_access import periode_service
from utils.decorators import admin_required

periode_bp = Blueprint("periodes", __name__, url_prefix="/periodes")


def _periode_document(periode):
    document = periode.to_document()
    document["dureeJours"] = periode.duree_jours
    return document


@periode_bp.route("")
@login_required
def list_periodes():
    periodes = sorted(periode_service.list_all(), key=lambda p: p.date_debut, reverse=True)
    return jsonify({"status": "success", "data": [_periode_document(p) for p in periodes]})


@periode_bp.route("/<periode_id>")
@login_required
def get_periode(periode_id):
    return jsonify(_periode_document(periode_service.get_or_404(periode_id)))


@periode_bp.route("", methods=["POST"])
@admin_required
def create_periode():
    periode_id = periode_service.create(request.get_json(silent=True) or {})
    return jsonify({"status": "success", "id": periode_id}), 201


@periode_bp.route("/<periode_id>", methods=["PUT", "PATCH"])
@admin_required
def update_periode(periode_id):
    periode_service.update(periode_id, request.get_json(silent=True) or {})
    return jsonify({"status": "success", "id": periode_id})


@periode_bp.route("/<periode_id>", methods=["DELETE"])
@admin_required
def delete_periode(periode_id):
    periode_service.delete(periode_id)
    return jsonify({"status": "success"})
