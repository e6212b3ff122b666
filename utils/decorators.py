from functools import wraps

from flask import jsonify
from flask_login import current_user


def role_required(*roles):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({"error": "Authentification requise"}), 401

            if current_user.role not in roles:
                return jsonify({"error": "Accès refusé : rôle insuffisant"}), 403

            return func(*args, **kwargs)
        return wrapper
    return decorator


admin_required = role_required("admin")
