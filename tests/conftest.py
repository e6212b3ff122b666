"""
PFMP tracking - test configuration and fixtures.

The ``app`` fixture builds a fresh application on an in-memory SQLite
database. Service tests request ``ctx`` to run inside an application
context; HTTP tests use the signed-in clients, which must not share that
context because Flask-Login caches the current user on ``g``.
"""
from datetime import date

import pytest

from app import create_app
from config.config import TestingConfig
from extensions import db
from services.auth_service import create_account
from services.data_access import classe_service, eleve_service, periode_service

ADMIN = {"nom": "Admin", "prenom": "Alice", "email": "admin@pfmp.test", "role": "admin"}
PROFESSEUR = {"nom": "Martin", "prenom": "Paul", "email": "prof@pfmp.test", "role": "professeur"}
PASSWORD = "secret-123"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


def _signed_in_client(app, account):
    with app.app_context():
        user_id = create_account(dict(account, password=PASSWORD))
    client = app.test_client()
    response = client.post("/login", json={"email": account["email"], "password": PASSWORD})
    assert response.status_code == 200
    client.user_id = user_id
    return client


@pytest.fixture
def admin_client(app):
    return _signed_in_client(app, ADMIN)


@pytest.fixture
def prof_client(app):
    return _signed_in_client(app, PROFESSEUR)


@pytest.fixture
def scenario(app):
    """Dupont Jean in class 2MTNE1, internship period PFMP1."""
    with app.app_context():
        classe_id = classe_service.create({
            "nom": "2MTNE1",
            "annee": "2023-2024",
            "professeurPrincipal": "M. Martin",
        })
        eleve_id = eleve_service.create({
            "nom": "Dupont",
            "prenom": "Jean",
            "classeId": classe_id,
            "dateNaissance": "2008-03-12",
        })
        periode_id = periode_service.create({
            "nom": "PFMP1",
            "dateDebut": date(2024, 1, 15),
            "dateFin": date(2024, 2, 15),
        })
    return {"classeId": classe_id, "eleveId": eleve_id, "periodeId": periode_id}
