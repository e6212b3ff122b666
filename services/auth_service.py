import logging

from flask import current_app
from sqlalchemy import or_

from extensions import db
from models.user import ROLES, User
from services.data_access import user_service
from utils.errors import ValidationError

logger = logging.getLogger(__name__)


def authenticate_user(email, password):
    if not email or not password:
        return None

    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user:
        return None

    if not user.check_password(password):
        return None

    return user


def list_accounts(role=None, search=None):
    query = User.query
    if role:
        if role not in ROLES:
            raise ValidationError(f"Rôle inconnu : {role}")
        query = query.filter_by(role=role)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            User.nom.ilike(pattern),
            User.prenom.ilike(pattern),
            User.email.ilike(pattern),
        ))
    return query.order_by(User.nom, User.prenom).all()


def _check_unique_email(email, exclude_id=None):
    if not email:
        return
    existing = User.query.filter_by(email=email.strip().lower()).first()
    if existing and existing.id != exclude_id:
        raise ValidationError(f"Un compte existe déjà pour l'email {email}")


def create_account(fields):
    fields = dict(fields or {})
    password = fields.pop("password", None) or ""
    fields.setdefault("role", "professeur")

    min_length = current_app.config["MIN_PASSWORD_LENGTH"]
    if len(password) < min_length:
        raise ValidationError(f"Le mot de passe doit contenir au moins {min_length} caractères")

    _check_unique_email(fields.get("email"))

    user = user_service.build(fields)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info("Created %s account %s", user.role, user.email)
    return user.id


def update_account(user_id, fields):
    """Profile and role changes only; the password is never touched here."""
    fields = dict(fields or {})
    if "password" in fields:
        raise ValidationError("Le mot de passe ne peut pas être modifié ici")

    user_service.get_or_404(user_id)
    _check_unique_email(fields.get("email"), exclude_id=user_id)
    user_service.update(user_id, fields)


def delete_account(user_id, acting_user_id):
    if user_id == acting_user_id:
        raise ValidationError("Vous ne pouvez pas supprimer votre propre compte")
    user_service.delete(user_id)


def ensure_admin(email, password, nom="Administrateur", prenom="PFMP"):
    """Create the admin account when no user owns ``email`` yet."""
    if User.query.filter_by(email=email.strip().lower()).first():
        return False
    create_account({"nom": nom, "prenom": prenom, "email": email, "role": "admin", "password": password})
    return True
