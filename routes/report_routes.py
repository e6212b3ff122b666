from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file
from flask_login import login_required

from services.excel_report import build_rows, render_excel
from services.import_service import XLSX_MIMETYPE
from services.pdf_report import PdfOptions, render_pdf
from services.report_layout import load_report_data, report_filename
from utils.errors import ValidationError

report_bp = Blueprint("rapports", __name__, url_prefix="/rapports")

NO_EVALUATION = "Aucune évaluation trouvée pour cette combinaison élève/période."


def _flag(name, default):
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() not in ("0", "false", "non", "no")


def _selection():
    eleve_id = request.args.get("eleveId")
    periode_id = request.args.get("periodeId")
    if not eleve_id or not periode_id:
        raise ValidationError("Veuillez sélectionner un élève et une période")
    return load_report_data(eleve_id, periode_id)


@report_bp.route("/preview")
@login_required
def preview():
    data = _selection()
    if data.evaluation is None:
        return jsonify({"error": NO_EVALUATION}), 404
    return jsonify({
        "status": "success",
        "evaluation": data.evaluation.to_document(),
        "rows": build_rows(data),
    })


@report_bp.route("/export")
@login_required
def export():
    file_format = request.args.get("format", "pdf")
    if file_format not in ("pdf", "excel"):
        raise ValidationError(f"Format d'export inconnu : {file_format}")

    data = _selection()
    if data.evaluation is None:
        return jsonify({"error": NO_EVALUATION}), 404

    if file_format == "excel":
        content = render_excel(data)
        mimetype = XLSX_MIMETYPE
        download_name = report_filename(data, "xlsx")
    else:
        options = PdfOptions(
            grid_table=_flag("grille", True),
            include_comments=_flag("commentaires", True),
        )
        content = render_pdf(data, options)
        mimetype = "application/pdf"
        download_name = report_filename(data, "pdf")

    current_app.logger.info("Exported %s", download_name)
    return send_file(
        BytesIO(content),
        mimetype=mimetype,
        as_attachment=True,
        download_name=download_name,
    )
