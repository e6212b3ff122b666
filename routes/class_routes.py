from flask import Blueprint, current_app, jsonify, request, send_file
from flask_login import login_required

from services.data_access import classe_service, eleve_service
from services.import_service import XLSX_MIMETYPE, import_students, roster_template
from utils.decorators import admin_required
from utils.errors import ImportFormatError

class_bp = Blueprint("classes", __name__)


def _json_body():
    return request.get_json(silent=True) or {}


def _eleve_document(eleve, classes):
    document = eleve.to_document()
    classe = classes.get(eleve.classe_id)
    document["classeNom"] = classe.nom if classe else None
    return document


# =========================================================
# CLASSES
# =========================================================
@class_bp.route("/classes")
@login_required
def list_classes():
    effectifs = classe_service.effectifs()
    data = []
    for classe in classe_service.list_all():
        document = classe.to_document()
        document["effectif"] = effectifs.get(classe.id, 0)
        data.append(document)
    return jsonify({"status": "success", "data": data})


@class_bp.route("/classes/<classe_id>")
@login_required
def get_classe(classe_id):
    classe = classe_service.get_or_404(classe_id)
    document = classe.to_document()
    document["effectif"] = len(eleve_service.list_by_classe(classe_id))
    return jsonify(document)


@class_bp.route("/classes", methods=["POST"])
@admin_required
def create_classe():
    classe_id = classe_service.create(_json_body())
    current_app.logger.info("Class %s created", classe_id)
    return jsonify({"status": "success", "id": classe_id}), 201


@class_bp.route("/classes/<classe_id>", methods=["PUT", "PATCH"])
@admin_required
def update_classe(classe_id):
    classe_service.update(classe_id, _json_body())
    return jsonify({"status": "success", "id": classe_id})


@class_bp.route("/classes/<classe_id>", methods=["DELETE"])
@admin_required
def delete_classe(classe_id):
    # Students keep their classeId and show up as "Non assignée".
    classe_service.delete(classe_id)
    return jsonify({"status": "success"})


@class_bp.route("/classes/<classe_id>/eleves")
@login_required
def list_classe_eleves(classe_id):
    classe = classe_service.get_or_404(classe_id)
    classes = {classe.id: classe}
    data = [_eleve_document(e, classes) for e in eleve_service.list_by_classe(classe_id)]
    return jsonify({"status": "success", "data": data})


# =========================================================
# STUDENTS
# =========================================================
@class_bp.route("/eleves")
@login_required
def list_eleves():
    classe_id = request.args.get("classeId")
    eleves = eleve_service.list_by_classe(classe_id) if classe_id else eleve_service.list_all()
    classes = {c.id: c for c in classe_service.list_all()}
    return jsonify({"status": "success", "data": [_eleve_document(e, classes) for e in eleves]})


@class_bp.route("/eleves/<eleve_id>")
@login_required
def get_eleve(eleve_id):
    eleve = eleve_service.get_or_404(eleve_id)
    classe = classe_service.get_by_id(eleve.classe_id)
    return jsonify(_eleve_document(eleve, {classe.id: classe} if classe else {}))


@class_bp.route("/eleves", methods=["POST"])
@admin_required
def create_eleve():
    eleve_id = eleve_service.create(_json_body())
    return jsonify({"status": "success", "id": eleve_id}), 201


@class_bp.route("/eleves/<eleve_id>", methods=["PUT", "PATCH"])
@admin_required
def update_eleve(eleve_id):
    eleve_service.update(eleve_id, _json_body())
    return jsonify({"status": "success", "id": eleve_id})


@class_bp.route("/eleves/<eleve_id>", methods=["DELETE"])
@admin_required
def delete_eleve(eleve_id):
    # Evaluations of the student are kept.
    eleve_service.delete(eleve_id)
    return jsonify({"status": "success"})


# =========================================================
# BULK IMPORT
# =========================================================
@class_bp.route("/eleves/import-template")
@admin_required
def download_import_template():
    return send_file(
        roster_template(),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name="modele_import_eleves.xlsx",
    )


@class_bp.route("/eleves/import", methods=["POST"])
@admin_required
def import_eleves():
    if "file" not in request.files:
        raise ImportFormatError("Aucun fichier reçu")

    file = request.files["file"]
    if file.filename == "":
        raise ImportFormatError("Aucun fichier sélectionné")

    classe_id = request.form.get("classeId") or None
    count = import_students(file.filename, file.read(), classe_id=classe_id)
    return jsonify({"status": "success", "count": count, "message": f"{count} élève(s) importé(s)"})
