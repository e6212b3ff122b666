import logging
from datetime import date

from flask import current_app

from models import PeriodeStage
from services.auth_service import ensure_admin
from services.data_access import periode_service

logger = logging.getLogger(__name__)

DEMO_PERIODE = {
    "nom": "PFMP1 - Test",
    "dateDebut": date(2024, 1, 15),
    "dateFin": date(2024, 2, 15),
}


def seed_admin():
    email = current_app.config["SEED_ADMIN_EMAIL"]
    if ensure_admin(email, current_app.config["SEED_ADMIN_PASSWORD"]):
        logger.info("Admin account %s created", email)
    else:
        logger.info("Admin account %s already present", email)


def seed_demo_periode():
    if PeriodeStage.query.filter_by(nom=DEMO_PERIODE["nom"]).first():
        logger.info("Demo period already present")
        return
    periode_service.create(dict(DEMO_PERIODE))
    logger.info("Demo period %s created", DEMO_PERIODE["nom"])


def run_seed():
    seed_admin()
    seed_demo_periode()
