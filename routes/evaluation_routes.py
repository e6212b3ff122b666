from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from services.data_access import evaluation_store
from services.evaluation_service import list_evaluations, load_evaluation_form, save_evaluation
from services.rubric import rubric_document

evaluation_bp = Blueprint("evaluations", __name__, url_prefix="/evaluations")


@evaluation_bp.route("/rubric")
@login_required
def rubric():
    return jsonify(rubric_document())


@evaluation_bp.route("")
@login_required
def list_all():
    evaluations = list_evaluations(
        eleve_id=request.args.get("eleveId"),
        periode_id=request.args.get("periodeId"),
    )
    return jsonify({"status": "success", "data": [e.to_document() for e in evaluations]})


@evaluation_bp.route("/form")
@login_required
def form():
    """Step two of the editor: stored evaluation or a blank rubric."""
    return jsonify(load_evaluation_form(request.args.get("eleveId"), request.args.get("periodeId")))


@evaluation_bp.route("", methods=["POST"])
@login_required
def save():
    evaluation_id, created = save_evaluation(request.get_json(silent=True) or {})
    current_app.logger.info(
        "Evaluation %s %s by %s", evaluation_id, "created" if created else "updated", current_user.email
    )
    return jsonify({
        "status": "success",
        "id": evaluation_id,
        "created": created,
        "message": "Évaluation sauvegardée avec succès !",
    }), 201 if created else 200


@evaluation_bp.route("/<evaluation_id>")
@login_required
def get_one(evaluation_id):
    return jsonify(evaluation_store.get_or_404(evaluation_id).to_document())
