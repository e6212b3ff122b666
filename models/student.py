from extensions import db
from models.document import DocumentMixin, clean_text, new_id, parse_iso_date, utcnow


class Eleve(DocumentMixin, db.Model):
    __tablename__ = "eleves"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    nom = db.Column(db.String(100), nullable=False)
    prenom = db.Column(db.String(100), nullable=False)

    # Plain reference: deleting a class leaves its students in place.
    classe_id = db.Column("classeId", db.String(32), nullable=False, index=True)

    email = db.Column(db.String(255), nullable=True)
    date_naissance = db.Column("dateNaissance", db.Date, nullable=True)
    created_at = db.Column("createdAt", db.DateTime, default=utcnow)

    DOCUMENT_FIELDS = {
        "nom": "nom",
        "prenom": "prenom",
        "classeId": "classe_id",
        "email": "email",
        "dateNaissance": "date_naissance",
    }
    TIMESTAMP_FIELDS = {"createdAt": "created_at"}
    REQUIRED_FIELDS = ("nom", "prenom", "classeId")

    def convert_field(self, key, value):
        if key == "dateNaissance":
            return parse_iso_date(value, key)
        if key == "email":
            return clean_text(value) or None
        return super().convert_field(key, value)

    @property
    def nom_complet(self):
        return f"{self.nom} {self.prenom}"

    def __repr__(self):
        return f"<Eleve {self.nom} {self.prenom}>"
