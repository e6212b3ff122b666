from datetime import date, datetime

import pytest

from models import Classe
from services.data_access import classe_service, eleve_service, periode_service
from utils.errors import NotFoundError, ValidationError

CLASSE = {"nom": "2MTNE1", "annee": "2023-2024", "professeurPrincipal": "M. Martin"}


def test_get_by_id_after_create_returns_input(ctx):
    classe_id = classe_service.create(dict(CLASSE))

    document = classe_service.get_by_id(classe_id).to_document()
    assert document["id"] == classe_id
    assert {k: document[k] for k in CLASSE} == CLASSE
    assert isinstance(classe_service.get_by_id(classe_id).created_at, datetime)


def test_get_by_id_missing_returns_none(ctx):
    assert classe_service.get_by_id("does-not-exist") is None
    assert classe_service.get_by_id(None) is None


def test_update_merges_supplied_fields_only(ctx):
    classe_id = classe_service.create(dict(CLASSE))
    before = classe_service.get_by_id(classe_id).updated_at

    classe_service.update(classe_id, {"professeurPrincipal": "Mme Durand"})

    classe = classe_service.get_by_id(classe_id)
    assert classe.professeur_principal == "Mme Durand"
    assert classe.nom == "2MTNE1"
    assert classe.updated_at >= before


def test_update_unknown_id_raises(ctx):
    with pytest.raises(NotFoundError):
        classe_service.update("missing", {"nom": "X"})


def test_delete_is_idempotent(ctx):
    classe_id = classe_service.create(dict(CLASSE))
    classe_service.delete(classe_id)
    classe_service.delete(classe_id)
    assert classe_service.get_by_id(classe_id) is None


def test_delete_does_not_cascade(ctx):
    classe_id = classe_service.create(dict(CLASSE))
    eleve_id = eleve_service.create({"nom": "Dupont", "prenom": "Jean", "classeId": classe_id})

    classe_service.delete(classe_id)

    assert eleve_service.get_by_id(eleve_id).classe_id == classe_id


def test_unknown_and_missing_fields_are_rejected(ctx):
    with pytest.raises(ValidationError, match="inconnu"):
        classe_service.create({"nom": "2MTNE1", "couleur": "bleu"})
    with pytest.raises(ValidationError, match="obligatoire"):
        eleve_service.create({"nom": "Dupont", "prenom": "Jean"})
    assert Classe.query.count() == 0


def test_read_only_fields_are_ignored(ctx):
    classe_id = classe_service.create(dict(CLASSE, id="forced", createdAt="2000-01-01"))
    assert classe_id != "forced"
    assert classe_service.get_by_id(classe_id).created_at.year != 2000


def test_period_dates_are_parsed_and_checked(ctx):
    periode_id = periode_service.create({"nom": "PFMP2", "dateDebut": "2024-03-04", "dateFin": "2024-03-29"})
    periode = periode_service.get_by_id(periode_id)
    assert periode.date_debut == date(2024, 3, 4)
    assert periode.duree_jours == 25

    with pytest.raises(ValidationError):
        periode_service.create({"nom": "PFMP3", "dateDebut": "2024-05-10", "dateFin": "2024-05-01"})
    with pytest.raises(ValidationError, match="Date invalide"):
        periode_service.create({"nom": "PFMP3", "dateDebut": "10/05/2024", "dateFin": "2024-06-01"})


def test_effectifs_count_students_per_class(ctx):
    first = classe_service.create({"nom": "2MTNE1"})
    second = classe_service.create({"nom": "1MTNE2"})
    for prenom in ("Jean", "Marie"):
        eleve_service.create({"nom": "Dupont", "prenom": prenom, "classeId": first})

    effectifs = classe_service.effectifs()
    assert effectifs[first] == 2
    assert effectifs.get(second, 0) == 0
