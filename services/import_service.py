"""
Bulk student import from a roster file (.csv or .xlsx).

The whole file is validated before anything is written. One bad row, one
missing column or one unknown class name rejects the file with zero writes;
a valid file is written in a single commit.
"""
import logging
from io import BytesIO, StringIO

import pandas as pd

from extensions import db
from services.data_access import classe_service, eleve_service
from utils.errors import ImportFormatError, ValidationError

logger = logging.getLogger(__name__)

GLOBAL_COLUMNS = ("nom", "prenom", "classe")
CLASS_COLUMNS = ("nom", "prenom", "dateNaissance")
OPTIONAL_COLUMNS = ("email", "dateNaissance")

TEMPLATE_COLUMNS = ["nom", "prenom", "classe", "email", "dateNaissance"]
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def read_roster(filename, raw):
    """Parse an uploaded roster into a DataFrame of stripped strings."""
    name = (filename or "").lower()
    try:
        if name.endswith(".xlsx"):
            df = pd.read_excel(BytesIO(raw), dtype=str, keep_default_na=False)
        elif name.endswith(".csv"):
            text = raw.decode("utf-8-sig")
            first_line = text.splitlines()[0] if text else ""
            separator = ";" if ";" in first_line else ","
            df = pd.read_csv(StringIO(text), sep=separator, dtype=str, keep_default_na=False)
        else:
            raise ImportFormatError("Format de fichier non supporté. Utilisez un fichier .csv ou .xlsx.")
    except (ValueError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise ImportFormatError(f"Fichier illisible : {exc}")

    df.columns = [str(c).strip() for c in df.columns]
    return df.apply(lambda column: column.map(lambda v: "" if pd.isna(v) else str(v).strip()))


def _missing_column(column, df):
    return ImportFormatError(
        f"Colonne manquante : {column}. Colonnes détectées : {', '.join(df.columns)}"
    )


def _check_columns(df, required):
    for column in required:
        if column not in df.columns:
            raise _missing_column(column, df)

    for column in required:
        if (df[column] == "").any():
            raise _missing_column(column, df)


def build_students(df, classe_id=None):
    """
    Validate every row and return unsaved ``Eleve`` records.

    Without ``classe_id`` each row names its class in the ``classe`` column;
    with it every row joins that class.
    """
    if df.empty:
        raise ImportFormatError("Le fichier ne contient aucun élève")

    if classe_id:
        if classe_service.get_by_id(classe_id) is None:
            raise ImportFormatError(f"Classe introuvable : {classe_id}")
        _check_columns(df, CLASS_COLUMNS)
        class_ids = [classe_id] * len(df)
    else:
        _check_columns(df, GLOBAL_COLUMNS)
        classes = classe_service.by_nom()
        unknown = sorted(set(df["classe"]) - set(classes))
        if unknown:
            raise ImportFormatError(f"Classe(s) inconnue(s) : {', '.join(unknown)}")
        class_ids = [classes[nom].id for nom in df["classe"]]

    students = []
    for line, (row, row_classe_id) in enumerate(zip(df.to_dict("records"), class_ids), start=2):
        fields = {"nom": row["nom"], "prenom": row["prenom"], "classeId": row_classe_id}
        for column in OPTIONAL_COLUMNS:
            if row.get(column):
                fields[column] = row[column]
        try:
            students.append(eleve_service.build(fields))
        except ValidationError as exc:
            raise ImportFormatError(f"Ligne {line} : {exc.message}")
    return students


def import_students(filename, raw, classe_id=None):
    """Import a roster file. Returns the number of students created."""
    df = read_roster(filename, raw)
    students = build_students(df, classe_id=classe_id)

    db.session.add_all(students)
    db.session.commit()
    logger.info("Imported %d student(s) from %s", len(students), filename)
    return len(students)


def roster_template():
    df = pd.DataFrame(columns=TEMPLATE_COLUMNS)
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Eleves")
    output.seek(0)
    return output
