import pytest

from models import Evaluation
from services.data_access import eleve_service, evaluation_store
from services.evaluation_service import list_evaluations, load_evaluation_form, save_evaluation
from services.rubric import COMPETENCY_KEYS
from utils.errors import NotFoundError, ValidationError


def _form(scenario, **extra):
    form = {"eleveId": scenario["eleveId"], "periodeId": scenario["periodeId"]}
    form.update(extra)
    return form


def test_no_evaluation_gives_blank_rubric(ctx, scenario):
    form = load_evaluation_form(scenario["eleveId"], scenario["periodeId"])

    assert form["id"] is None
    assert set(form["competences"]) == set(COMPETENCY_KEYS)
    assert all(r == {"niveau": "non_evaluee", "commentaire": ""} for r in form["competences"].values())
    assert form["commentaireGeneral"] == ""
    assert Evaluation.query.count() == 0


def test_first_save_creates_second_save_updates(ctx, scenario):
    form = load_evaluation_form(scenario["eleveId"], scenario["periodeId"])
    form["competences"]["cc1_collecter_donnees"] = {"niveau": "en_cours", "commentaire": ""}

    evaluation_id, created = save_evaluation(form)
    assert created is True
    assert Evaluation.query.count() == 1

    form = load_evaluation_form(scenario["eleveId"], scenario["periodeId"])
    assert form["id"] == evaluation_id
    form["competences"]["cc1_collecter_donnees"]["niveau"] = "acquise"
    form["commentaireGeneral"] = "Bon travail"

    second_id, created = save_evaluation(form)
    assert second_id == evaluation_id
    assert created is False
    assert Evaluation.query.count() == 1

    evaluation = evaluation_store.get_by_id(evaluation_id)
    assert evaluation.rating("cc1_collecter_donnees").niveau == "acquise"
    assert evaluation.commentaire_general == "Bon travail"


def test_save_restamps_evaluation_date(ctx, scenario):
    evaluation_id, _ = save_evaluation(_form(scenario, dateEvaluation="1999-01-01T00:00:00"))
    first = evaluation_store.get_by_id(evaluation_id).date_evaluation
    assert first.year != 1999

    save_evaluation(_form(scenario, id=evaluation_id))
    assert evaluation_store.get_by_id(evaluation_id).date_evaluation >= first


def test_create_against_existing_pair_updates_it(ctx, scenario):
    existing_id = evaluation_store.create(_form(scenario, commentaireGeneral="premier"))

    evaluation_id, created = save_evaluation(_form(scenario, commentaireGeneral="second"))

    assert evaluation_id == existing_id
    assert created is False
    assert Evaluation.query.count() == 1
    assert evaluation_store.get_by_id(existing_id).commentaire_general == "second"


def test_save_requires_student_and_period(ctx, scenario):
    with pytest.raises(ValidationError):
        save_evaluation({"eleveId": scenario["eleveId"]})
    with pytest.raises(NotFoundError):
        save_evaluation({"eleveId": "ghost", "periodeId": scenario["periodeId"]})
    assert Evaluation.query.count() == 0


def test_save_rejects_invalid_ratings(ctx, scenario):
    with pytest.raises(ValidationError):
        save_evaluation(_form(scenario, competences={"cc1_collecter_donnees": {"niveau": "5"}}))
    assert Evaluation.query.count() == 0


def test_optional_fields_round_trip(ctx, scenario):
    save_evaluation(_form(
        scenario,
        nomEntreprise="Clim Services",
        domaineActivite="Froid et climatisation",
        nomTuteur="M. Bernard",
    ))
    form = load_evaluation_form(scenario["eleveId"], scenario["periodeId"])
    assert form["nomEntreprise"] == "Clim Services"
    assert form["nomTuteur"] == "M. Bernard"


def test_list_evaluations_filters(ctx, scenario):
    save_evaluation(_form(scenario))
    assert len(list_evaluations(eleve_id=scenario["eleveId"])) == 1
    assert list_evaluations(periode_id="other") == []


def test_saved_id_must_match_the_pair(ctx, scenario):
    evaluation_id, _ = save_evaluation(_form(scenario, commentaireGeneral="Jean"))
    other_id = eleve_service.create({"nom": "Martin", "prenom": "Léa", "classeId": scenario["classeId"]})

    with pytest.raises(ValidationError):
        save_evaluation({"id": evaluation_id, "eleveId": other_id, "periodeId": scenario["periodeId"]})
    with pytest.raises(NotFoundError):
        save_evaluation(_form(scenario, id="missing"))

    evaluation = evaluation_store.get_by_id(evaluation_id)
    assert evaluation.eleve_id == scenario["eleveId"]
    assert evaluation.commentaire_general == "Jean"
