"""
Evaluation editor: load the form for a (student, period) pair and save it.

A pair has at most one evaluation. The first save creates it, later saves
update the same record. The unique constraint on the table settles two
first saves racing each other: the loser updates the winner's record.
"""
import logging

from sqlalchemy.exc import IntegrityError

from extensions import db
from models.document import utcnow
from services.data_access import eleve_service, evaluation_store, periode_service
from services.rubric import empty_competences
from utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

OPTIONAL_TEXT_FIELDS = ("nomEntreprise", "domaineActivite", "nomTuteur")
SERVER_FIELDS = ("id", "dateEvaluation", "createdAt", "updatedAt")


def _require_pair(eleve_id, periode_id):
    if not eleve_id or not periode_id:
        raise ValidationError("Veuillez sélectionner un élève et une période")


def blank_form(eleve_id, periode_id):
    return {
        "id": None,
        "eleveId": eleve_id,
        "periodeId": periode_id,
        "dateEvaluation": None,
        "competences": empty_competences(),
        "commentaireGeneral": "",
        "recommandations": "",
        "nomEntreprise": "",
        "domaineActivite": "",
        "nomTuteur": "",
    }


def load_evaluation_form(eleve_id, periode_id):
    """Stored evaluation for the pair, or a blank rubric with ``id`` unset."""
    _require_pair(eleve_id, periode_id)

    evaluation = evaluation_store.find_for_pair(eleve_id, periode_id)
    if evaluation is None:
        logger.debug("No evaluation for eleve=%s periode=%s", eleve_id, periode_id)
        return blank_form(eleve_id, periode_id)

    form = evaluation.to_document()
    for key in OPTIONAL_TEXT_FIELDS:
        form[key] = form[key] or ""
    return form


def save_evaluation(form):
    """
    Persist the editor form.

    Returns ``(evaluation_id, created)``. ``dateEvaluation`` is stamped on
    every save; any value sent by the client is ignored.
    """
    if not isinstance(form, dict):
        raise ValidationError("Document invalide")

    eleve_id = form.get("eleveId")
    periode_id = form.get("periodeId")
    _require_pair(eleve_id, periode_id)

    if eleve_service.get_by_id(eleve_id) is None:
        raise NotFoundError(f"Élève introuvable : {eleve_id}")
    if periode_service.get_by_id(periode_id) is None:
        raise NotFoundError(f"Période de stage introuvable : {periode_id}")

    fields = {k: v for k, v in form.items() if k not in SERVER_FIELDS}
    fields["dateEvaluation"] = utcnow()

    evaluation_id = form.get("id")
    if evaluation_id:
        stored = evaluation_store.get_or_404(evaluation_id)
        if (stored.eleve_id, stored.periode_id) != (eleve_id, periode_id):
            raise ValidationError("L'évaluation ne correspond pas à cet élève et cette période")
        evaluation_store.update(evaluation_id, fields)
        return evaluation_id, False

    try:
        return evaluation_store.create(fields), True
    except IntegrityError:
        db.session.rollback()
        existing = evaluation_store.find_for_pair(eleve_id, periode_id)
        if existing is None:
            raise
        logger.warning(
            "Evaluation for eleve=%s periode=%s already exists (%s), updating it",
            eleve_id, periode_id, existing.id,
        )
        evaluation_store.update(existing.id, fields)
        return existing.id, False


def list_evaluations(eleve_id=None, periode_id=None):
    criteria = {}
    if eleve_id:
        criteria["eleve_id"] = eleve_id
    if periode_id:
        criteria["periode_id"] = periode_id
    return evaluation_store.find_by(**criteria)
