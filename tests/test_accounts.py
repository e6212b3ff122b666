import pytest

from extensions import db
from models import User
from services.auth_service import authenticate_user, create_account, delete_account, list_accounts, update_account
from utils.errors import ValidationError

ACCOUNT = {"nom": "Durand", "prenom": "Sophie", "email": "Sophie.Durand@ecole.fr", "password": "motdepasse"}


def test_create_and_authenticate(ctx):
    user_id = create_account(dict(ACCOUNT))

    user = db.session.get(User, user_id)
    assert user.email == "sophie.durand@ecole.fr"
    assert user.role == "professeur"
    assert user.password_hash != "motdepasse"
    assert authenticate_user("sophie.durand@ecole.fr", "motdepasse").id == user_id
    assert authenticate_user("sophie.durand@ecole.fr", "wrong") is None
    assert authenticate_user("nobody@ecole.fr", "motdepasse") is None


def test_short_password_is_rejected(ctx):
    with pytest.raises(ValidationError, match="au moins 6"):
        create_account(dict(ACCOUNT, password="12345"))
    assert User.query.count() == 0


def test_duplicate_email_and_bad_role_are_rejected(ctx):
    create_account(dict(ACCOUNT))
    with pytest.raises(ValidationError, match="existe déjà"):
        create_account(dict(ACCOUNT, nom="Autre"))
    with pytest.raises(ValidationError, match="Rôle inconnu"):
        create_account(dict(ACCOUNT, email="x@ecole.fr", role="directeur"))


def test_update_does_not_touch_password(ctx):
    user_id = create_account(dict(ACCOUNT))
    update_account(user_id, {"role": "admin", "nom": "Durand-Leroy"})

    user = db.session.get(User, user_id)
    assert user.role == "admin"
    assert user.nom == "Durand-Leroy"
    assert user.check_password("motdepasse")

    with pytest.raises(ValidationError):
        update_account(user_id, {"password": "nouveau-secret"})


def test_list_filters_by_role_and_search(ctx):
    create_account(dict(ACCOUNT))
    create_account({"nom": "Admin", "prenom": "Root", "email": "root@ecole.fr", "password": "secret-1", "role": "admin"})

    assert [u.nom for u in list_accounts(role="admin")] == ["Admin"]
    assert [u.nom for u in list_accounts(search="durand")] == ["Durand"]
    assert len(list_accounts()) == 2


def test_cannot_delete_own_account(ctx):
    user_id = create_account(dict(ACCOUNT))
    with pytest.raises(ValidationError):
        delete_account(user_id, user_id)
    delete_account(user_id, "someone-else")
    assert User.query.count() == 0
