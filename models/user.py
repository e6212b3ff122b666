from extensions import db
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from models.document import DocumentMixin, new_id, utcnow
from utils.errors import ValidationError

ROLES = ("admin", "professeur")


class User(UserMixin, DocumentMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    nom = db.Column(db.String(100), nullable=False, default="")
    prenom = db.Column(db.String(100), nullable=False, default="")
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(*ROLES, name="user_role"), nullable=False, default="professeur")
    created_at = db.Column("createdAt", db.DateTime, default=utcnow)

    DOCUMENT_FIELDS = {
        "nom": "nom",
        "prenom": "prenom",
        "email": "email",
        "role": "role",
    }
    TIMESTAMP_FIELDS = {"createdAt": "created_at"}
    REQUIRED_FIELDS = ("nom", "prenom", "email", "role")

    def convert_field(self, key, value):
        value = super().convert_field(key, value)
        if key == "email" and value:
            return value.lower()
        if key == "role" and value not in ROLES:
            raise ValidationError(f"Rôle inconnu : {value}")
        return value

    @property
    def is_admin(self):
        return self.role == "admin"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.email}>"
