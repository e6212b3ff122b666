from extensions import db
from models.document import DocumentMixin, new_id, utcnow


class Classe(DocumentMixin, db.Model):
    __tablename__ = "classes"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    nom = db.Column(db.String(50), nullable=False)
    annee = db.Column(db.String(9), nullable=False, default="")
    professeur_principal = db.Column("professeurPrincipal", db.String(200), nullable=False, default="")
    created_at = db.Column("createdAt", db.DateTime, default=utcnow)
    updated_at = db.Column("updatedAt", db.DateTime, default=utcnow)

    DOCUMENT_FIELDS = {
        "nom": "nom",
        "annee": "annee",
        "professeurPrincipal": "professeur_principal",
    }
    TIMESTAMP_FIELDS = {"createdAt": "created_at", "updatedAt": "updated_at"}
    REQUIRED_FIELDS = ("nom",)

    def convert_field(self, key, value):
        if key in ("annee", "professeurPrincipal"):
            return "" if value is None else str(value).strip()
        return super().convert_field(key, value)

    def __repr__(self):
        return f"<Classe {self.nom}>"
