"""
Spreadsheet rendering of an evaluation report.

The sheet is a flat grid written with pandas/openpyxl. openpyxl stamps the
archive entries and docProps/core.xml with the current time, so the
workbook is rewritten with a timestamp taken from the data itself; the same
evaluation always yields the same bytes.
"""
import re
import zipfile
from datetime import datetime
from io import BytesIO

import pandas as pd

from services.report_layout import format_date_fr
from services.rubric import iter_rubric

SHEET_NAME = "Évaluation PFMP"
TITLE = "PFMP - Évaluation des compétences"
COLUMN_HEADER = ["Compétence", "Sous-compétence", "Niveau", "Commentaire"]

# Earliest timestamp a zip entry can carry.
ZIP_EPOCH = datetime(1980, 1, 1)

CORE_DATE_RE = re.compile(r"(<dcterms:(created|modified)[^>]*>)[^<]*(</dcterms:\2>)")


def build_rows(data):
    eleve, periode = data.eleve, data.periode

    rows = [
        [TITLE],
        [""],
        ["Élève:", f"{eleve.nom} {eleve.prenom}"],
        ["Classe:", data.classe_nom],
        ["Période:", periode.nom],
        ["Du:", format_date_fr(periode.date_debut)],
        ["Au:", format_date_fr(periode.date_fin)],
        ["Entreprise:", data.text("nom_entreprise")],
        ["Domaine d'activité:", data.text("domaine_activite")],
        ["Tuteur:", data.text("nom_tuteur")],
        [""],
        list(COLUMN_HEADER),
    ]

    for cluster, item, is_first in iter_rubric():
        rating = data.rating(item.key)
        rows.append([
            cluster.export_label if is_first else "",
            item.short_label,
            rating.level.symbol,
            rating.commentaire,
        ])

    rows += [
        [""],
        ["Commentaire général:", data.text("commentaire_general")],
        ["Recommandations:", data.text("recommandations")],
    ]
    return rows


def _keep_text_literal(sheet):
    """openpyxl reads any string starting with "=" as a formula; user text stays text."""
    for row in sheet.iter_rows():
        for cell in row:
            if isinstance(cell.value, str) and cell.value.startswith("="):
                cell.data_type = "s"


def _stamp(data):
    if data.evaluation is not None and data.evaluation.date_evaluation is not None:
        return max(data.evaluation.date_evaluation.replace(microsecond=0), ZIP_EPOCH)
    return ZIP_EPOCH


def _freeze_archive(raw, stamp):
    core_stamp = stamp.strftime("%Y-%m-%dT%H:%M:%SZ")
    zip_stamp = stamp.timetuple()[:6]

    source = zipfile.ZipFile(BytesIO(raw))
    output = BytesIO()
    with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
        for entry in source.infolist():
            payload = source.read(entry.filename)
            if entry.filename == "docProps/core.xml":
                text = payload.decode("utf-8")
                payload = CORE_DATE_RE.sub(rf"\g<1>{core_stamp}\g<3>", text).encode("utf-8")
            frozen = zipfile.ZipInfo(entry.filename, date_time=zip_stamp)
            frozen.compress_type = zipfile.ZIP_DEFLATED
            frozen.external_attr = entry.external_attr
            target.writestr(frozen, payload)
    source.close()
    return output.getvalue()


def render_excel(data):
    """Render ``ReportData`` to XLSX bytes."""
    df = pd.DataFrame(build_rows(data))

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, header=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]
        for column, width in zip("ABCD", (30, 32, 10, 40)):
            sheet.column_dimensions[column].width = width
        _keep_text_literal(sheet)

    return _freeze_archive(buffer.getvalue(), _stamp(data))
