"""Core authentication routes: login, plus validators shared with user routes."""

from flask import request, jsonify, current_app
from app import limiter
from app.routes.auth import auth_bp
from app.services import accounts
from datetime import datetime, timedelta
import jwt
import re

# ---------------------------------------------------------------------------
# Shared constants & helpers (used by sibling modules via import)
# ---------------------------------------------------------------------------

EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


# Field names of the first API version (`senha`, camelCase), accepted alongside the current ones
FIELD_ALIASES = {
    'password': ('senha',),
    'current_password': ('currentPassword',),
    'new_password': ('newPassword',),
}


def get_json_fields():
    """Return the request's JSON object with legacy field names mapped, or None if it is not an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None

    fields = dict(data)
    for name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            if alias in data:
                fields.setdefault(name, data[alias])
    return fields


def validate_email(email):
    """Return an error message for an unusable email, or None."""
    if not isinstance(email, str) or not EMAIL_REGEX.match(email.strip()):
        return 'Invalid email format'
    if len(email.strip()) > 254:
        return 'Email is too long'
    return None


def validate_password(password):
    """Return an error message for an unusable password, or None."""
    if not isinstance(password, str):
        return 'Password must be a string'
    if len(password) < PASSWORD_MIN_LENGTH:
        return f'Password must be at least {PASSWORD_MIN_LENGTH} characters'
    if len(password) > PASSWORD_MAX_LENGTH:
        return f'Password must be less than {PASSWORD_MAX_LENGTH} characters'
    return None


def issue_token(user):
    """Sign a login token for ``user``."""
    payload = {
        'user_id': user.id,
        'email': user.email,
        'exp': datetime.utcnow() + timedelta(seconds=current_app.config['JWT_ACCESS_TOKEN_EXPIRES'])
    }
    return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm='HS256')


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@auth_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    """Authenticate user and return JWT token."""
    data = get_json_fields()

    if not data or not all(k in data for k in ['email', 'password']):
        return jsonify({'error': 'Missing email or password'}), 400

    if not isinstance(data['email'], str) or not isinstance(data['password'], str):
        return jsonify({'error': 'Invalid email or password'}), 401

    user = accounts.authenticate(data['email'], data['password'])

    if not user:
        current_app.logger.info("Failed login attempt")
        return jsonify({'error': 'Invalid email or password'}), 401

    return jsonify({
        'message': 'Login successful',
        'token': issue_token(user),
        'user': user.to_dict()
    }), 200
