from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from services.auth_service import authenticate_user

auth_bp = Blueprint("auth", __name__)

HOME_TILES = [
    {"label": "Gérer les classes", "link": "/classes", "roles": ("admin",)},
    {"label": "Gérer les stages", "link": "/periodes", "roles": ("admin",)},
    {"label": "Évaluer un élève", "link": "/evaluations", "roles": ("admin", "professeur")},
    {"label": "Exporter rapports", "link": "/rapports", "roles": ("admin", "professeur")},
    {"label": "Gestion des comptes", "link": "/admin/users", "roles": ("admin",)},
]


# =========================================================
# LOGIN / LOGOUT
# =========================================================
@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or request.form
    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        return jsonify({"error": "Email et mot de passe requis"}), 400

    user = authenticate_user(email, password)
    if not user:
        current_app.logger.info("Failed login for %s", email)
        return jsonify({"error": "Email ou mot de passe incorrect"}), 401

    login_user(user)
    current_app.logger.info("User %s signed in", user.email)
    return jsonify({"status": "success", "user": user.to_document()})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    current_app.logger.info("User %s signed out", current_user.email)
    logout_user()
    return jsonify({"status": "success"})


# =========================================================
# SESSION / HOME
# =========================================================
@auth_bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_document())


@auth_bp.route("/")
@login_required
def home():
    tiles = [
        {"label": t["label"], "link": t["link"]}
        for t in HOME_TILES
        if current_user.role in t["roles"]
    ]
    return jsonify({
        "user": current_user.to_document(),
        "message": f"Connecté en tant que : {current_user.prenom} {current_user.nom} ({current_user.role})",
        "tiles": tiles,
    })
