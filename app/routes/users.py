"""User account CRUD routes."""

from flask import Blueprint, jsonify
from app import db
from app.routes.auth.core import get_json_fields, validate_email, validate_password
from app.services import accounts
from app.services.accounts import EmailAlreadyRegistered

users_bp = Blueprint('users', __name__)


@users_bp.route('', methods=['GET'])
def list_users():
    """List all user accounts."""
    return jsonify([user.to_dict() for user in accounts.list_accounts()]), 200


@users_bp.route('/<user_id>', methods=['GET'])
def get_user(user_id):
    """Get a single user account by ID."""
    user = accounts.find_by_id(user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404
    return jsonify(user.to_dict()), 200


@users_bp.route('', methods=['POST'])
def create_user():
    """Create a user account with a hashed password."""
    try:
        data = get_json_fields()

        if not data or not all(k in data for k in ['email', 'password']):
            return jsonify({'error': 'Missing required fields'}), 400

        error = validate_email(data['email']) or validate_password(data['password'])
        if error:
            return jsonify({'error': error}), 400

        try:
            user = accounts.create_account(data['email'], data['password'])
        except EmailAlreadyRegistered:
            return jsonify({'error': 'Email already exists'}), 409

        return jsonify({'user': user.to_dict()}), 201
    except Exception:
        db.session.rollback()
        raise


@users_bp.route('/<user_id>', methods=['PUT'])
def update_user(user_id):
    """Update email and/or password of a user account."""
    try:
        data = get_json_fields()
        if not isinstance(data, dict):
            return jsonify({'error': 'No data provided for update'}), 400

        email = data.get('email') or None
        password = data.get('password') or None

        if email is None and password is None:
            return jsonify({'error': 'No data provided for update'}), 400

        error = (email is not None and validate_email(email)) or \
            (password is not None and validate_password(password))
        if error:
            return jsonify({'error': error}), 400

        user = accounts.find_by_id(user_id)
        if not user:
            return jsonify({'error': 'User not found'}), 404

        try:
            accounts.update_account(user, email=email, password=password)
        except EmailAlreadyRegistered:
            return jsonify({'error': 'Email already exists'}), 409

        return jsonify({'user': user.to_dict()}), 200
    except Exception:
        db.session.rollback()
        raise


@users_bp.route('/<user_id>', methods=['DELETE'])
def delete_user(user_id):
    """Delete a user account."""
    try:
        user = accounts.find_by_id(user_id)
        if not user:
            return jsonify({'error': 'User not found'}), 404

        accounts.delete_account(user)
        return '', 204
    except Exception:
        db.session.rollback()
        raise
