"""Auth routes package.

This package organizes authentication-related routes into logical submodules:
- core: Login, shared validators and token issuing
- password: Password change and self-service account deletion
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

# Import all route modules (registers routes on auth_bp)
from app.routes.auth import core  # noqa: E402,F401
from app.routes.auth import password  # noqa: E402,F401
