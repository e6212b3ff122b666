from extensions import db
from models.document import DocumentMixin, clean_text, new_id, parse_iso_datetime, utcnow
from services.rubric import UNRATED, CompetencyRating, empty_competences, normalize_competences


class Evaluation(DocumentMixin, db.Model):
    __tablename__ = "evaluations"

    id = db.Column(db.String(32), primary_key=True, default=new_id)

    # Plain references: evaluations outlive deleted students and periods.
    eleve_id = db.Column("eleveId", db.String(32), nullable=False, index=True)
    periode_id = db.Column("periodeId", db.String(32), nullable=False, index=True)

    date_evaluation = db.Column("dateEvaluation", db.DateTime, nullable=False, default=utcnow)
    competences = db.Column(db.JSON, nullable=False, default=empty_competences)
    commentaire_general = db.Column("commentaireGeneral", db.Text, nullable=False, default="")
    recommandations = db.Column(db.Text, nullable=False, default="")
    nom_entreprise = db.Column("nomEntreprise", db.String(200), nullable=True)
    domaine_activite = db.Column("domaineActivite", db.String(200), nullable=True)
    nom_tuteur = db.Column("nomTuteur", db.String(200), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("eleveId", "periodeId", name="unique_eleve_periode"),
    )

    DOCUMENT_FIELDS = {
        "eleveId": "eleve_id",
        "periodeId": "periode_id",
        "dateEvaluation": "date_evaluation",
        "competences": "competences",
        "commentaireGeneral": "commentaire_general",
        "recommandations": "recommandations",
        "nomEntreprise": "nom_entreprise",
        "domaineActivite": "domaine_activite",
        "nomTuteur": "nom_tuteur",
    }
    REQUIRED_FIELDS = ("eleveId", "periodeId")

    def convert_field(self, key, value):
        if key == "competences":
            return normalize_competences(value)
        if key == "dateEvaluation":
            return parse_iso_datetime(value, key)
        if key in ("commentaireGeneral", "recommandations"):
            return "" if value is None else str(value)
        if key in ("nomEntreprise", "domaineActivite", "nomTuteur"):
            return clean_text(value) or None
        return super().convert_field(key, value)

    def rating(self, key):
        raw = (self.competences or {}).get(key) or {}
        return CompetencyRating(
            raw.get("niveau") or UNRATED.code,
            raw.get("commentaire") or "",
        )

    def __repr__(self):
        return f"<Evaluation eleve={self.eleve_id} periode={self.periode_id}>"
