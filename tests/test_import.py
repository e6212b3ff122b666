from io import BytesIO

import pandas as pd
import pytest

from models import Eleve
from services.data_access import classe_service
from services.import_service import TEMPLATE_COLUMNS, import_students, roster_template
from utils.errors import ImportFormatError


@pytest.fixture
def classes(ctx):
    return {
        "2MTNE1": classe_service.create({"nom": "2MTNE1"}),
        "1MTNE2": classe_service.create({"nom": "1MTNE2"}),
    }


def _xlsx(rows):
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, index=False)
    return output.getvalue()


def test_missing_classe_column_is_rejected_without_writes(classes):
    raw = "nom;prenom;email\nDupont;Jean;jean@ecole.fr\n".encode("utf-8")

    with pytest.raises(ImportFormatError, match="Colonne manquante : classe"):
        import_students("eleves.csv", raw)
    assert Eleve.query.count() == 0


def test_semicolon_csv_is_imported(classes):
    raw = "nom;prenom;classe\nDupont;Jean;2MTNE1\nMartin;Léa;1MTNE2\n".encode("utf-8")

    assert import_students("eleves.csv", raw) == 2
    students = {e.prenom: e for e in Eleve.query.all()}
    assert students["Jean"].classe_id == classes["2MTNE1"]
    assert students["Léa"].classe_id == classes["1MTNE2"]


def test_comma_csv_with_optional_columns(classes):
    raw = b"nom,prenom,classe,email,dateNaissance\nDupont,Jean,2MTNE1,jean@ecole.fr,2008-03-12\n"

    assert import_students("eleves.csv", raw) == 1
    eleve = Eleve.query.one()
    assert eleve.email == "jean@ecole.fr"
    assert eleve.date_naissance.isoformat() == "2008-03-12"


def test_unknown_class_rejects_whole_file(classes):
    raw = "nom;prenom;classe\nDupont;Jean;2MTNE1\nMartin;Léa;3XYZ\n".encode("utf-8")

    with pytest.raises(ImportFormatError, match="Classe\\(s\\) inconnue\\(s\\) : 3XYZ"):
        import_students("eleves.csv", raw)
    assert Eleve.query.count() == 0


def test_empty_required_cell_rejects_whole_file(classes):
    raw = "nom;prenom;classe\nDupont;Jean;2MTNE1\nMartin;;2MTNE1\n".encode("utf-8")

    with pytest.raises(ImportFormatError, match="Colonne manquante : prenom"):
        import_students("eleves.csv", raw)
    assert Eleve.query.count() == 0


def test_bad_date_rejects_whole_file(classes):
    raw = "nom;prenom;classe;dateNaissance\nDupont;Jean;2MTNE1;2008-03-12\nMartin;Léa;2MTNE1;demain\n".encode("utf-8")

    with pytest.raises(ImportFormatError, match="Ligne 3"):
        import_students("eleves.csv", raw)
    assert Eleve.query.count() == 0


def test_class_scoped_xlsx_import(classes):
    raw = _xlsx([
        {"nom": "Dupont", "prenom": "Jean", "dateNaissance": "2008-03-12"},
        {"nom": "Martin", "prenom": "Léa", "dateNaissance": "2007-11-02"},
    ])

    assert import_students("eleves.xlsx", raw, classe_id=classes["1MTNE2"]) == 2
    assert {e.classe_id for e in Eleve.query.all()} == {classes["1MTNE2"]}


def test_class_scoped_import_requires_birth_date(classes):
    raw = b"nom;prenom\nDupont;Jean\n"

    with pytest.raises(ImportFormatError, match="Colonne manquante : dateNaissance"):
        import_students("eleves.csv", raw, classe_id=classes["2MTNE1"])


def test_unsupported_file_type(classes):
    with pytest.raises(ImportFormatError, match="non supporté"):
        import_students("eleves.txt", b"nom;prenom;classe\n")


def test_template_has_expected_columns(ctx):
    df = pd.read_excel(roster_template())
    assert list(df.columns) == TEMPLATE_COLUMNS
