from extensions import db
from models.document import DocumentMixin, new_id, parse_iso_date
from utils.errors import ValidationError


class PeriodeStage(DocumentMixin, db.Model):
    __tablename__ = "periodesStage"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    nom = db.Column(db.String(100), nullable=False)
    date_debut = db.Column("dateDebut", db.Date, nullable=False)
    date_fin = db.Column("dateFin", db.Date, nullable=False)

    DOCUMENT_FIELDS = {
        "nom": "nom",
        "dateDebut": "date_debut",
        "dateFin": "date_fin",
    }
    REQUIRED_FIELDS = ("nom", "dateDebut", "dateFin")

    def convert_field(self, key, value):
        if key in ("dateDebut", "dateFin"):
            return parse_iso_date(value, key)
        return super().convert_field(key, value)

    def apply_document(self, fields, partial=False):
        super().apply_document(fields, partial=partial)
        if self.date_debut and self.date_fin and self.date_fin < self.date_debut:
            raise ValidationError("La date de fin doit être postérieure à la date de début")
        return self

    @property
    def duree_jours(self):
        if not self.date_debut or not self.date_fin:
            return 0
        return (self.date_fin - self.date_debut).days

    def __repr__(self):
        return f"<PeriodeStage {self.nom}>"
