"""
Per-collection read/write functions.

Every collection exposes the same five operations. Each call is its own unit
of work: nothing spans two collections and deletes never cascade.
"""
import logging

from sqlalchemy import func

from extensions import db
from models import Classe, Eleve, Evaluation, PeriodeStage, User
from models.document import new_id, utcnow
from utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CollectionService:
    def __init__(self, model, collection_name, label):
        self.model = model
        self.collection_name = collection_name
        self.label = label

    def list_all(self):
        return self.model.query.all()

    def get_by_id(self, record_id):
        if not record_id:
            return None
        return db.session.get(self.model, record_id)

    def get_or_404(self, record_id):
        record = self.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} introuvable : {record_id}")
        return record

    def find_by(self, **criteria):
        return self.model.query.filter_by(**criteria).all()

    def build(self, fields):
        """Validated, unsaved record. Callers that batch writes add it themselves."""
        record = self.model(id=new_id())
        try:
            record.apply_document(fields)
        except ValidationError:
            db.session.rollback()
            raise
        now = utcnow()
        for attr in self.model.TIMESTAMP_FIELDS.values():
            setattr(record, attr, now)
        return record

    def create(self, fields):
        record = self.build(fields)
        db.session.add(record)
        db.session.commit()
        logger.info("Created %s/%s", self.collection_name, record.id)
        return record.id

    def update(self, record_id, fields):
        record = self.get_or_404(record_id)
        try:
            record.apply_document(fields, partial=True)
        except ValidationError:
            db.session.rollback()
            raise
        if "updatedAt" in self.model.TIMESTAMP_FIELDS:
            setattr(record, self.model.TIMESTAMP_FIELDS["updatedAt"], utcnow())
        db.session.commit()
        logger.info("Updated %s/%s (%s)", self.collection_name, record_id, ", ".join(sorted(fields)))

    def delete(self, record_id):
        record = self.get_by_id(record_id)
        if record is None:
            logger.info("Delete %s/%s: already absent", self.collection_name, record_id)
            return
        db.session.delete(record)
        db.session.commit()
        logger.info("Deleted %s/%s", self.collection_name, record_id)


class ClasseService(CollectionService):
    def effectifs(self):
        rows = (
            db.session.query(Eleve.classe_id, func.count(Eleve.id))
            .group_by(Eleve.classe_id)
            .all()
        )
        return {classe_id: count for classe_id, count in rows}

    def by_nom(self):
        return {c.nom: c for c in self.list_all()}


class EleveService(CollectionService):
    def list_by_classe(self, classe_id):
        return self.find_by(classe_id=classe_id)


class EvaluationStore(CollectionService):
    def find_for_pair(self, eleve_id, periode_id):
        return (
            Evaluation.query
            .filter_by(eleve_id=eleve_id, periode_id=periode_id)
            .order_by(Evaluation.date_evaluation.asc())
            .first()
        )


classe_service = ClasseService(Classe, "classes", "Classe")
eleve_service = EleveService(Eleve, "eleves", "Élève")
periode_service = CollectionService(PeriodeStage, "periodesStage", "Période de stage")
evaluation_store = EvaluationStore(Evaluation, "evaluations", "Évaluation")
user_service = CollectionService(User, "users", "Utilisateur")
