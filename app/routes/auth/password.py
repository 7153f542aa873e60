"""Credential-confirmed account routes: change password and delete account."""

from flask import jsonify, current_app
from app import db, limiter
from app.routes.auth import auth_bp
from app.routes.auth.core import get_json_fields, validate_password
from app.services import accounts


def _credentials_ok(data, password_key):
    return isinstance(data.get('email'), str) and isinstance(data.get(password_key), str)


@auth_bp.route('/change-password', methods=['POST'])
@limiter.limit("5 per minute")
def change_password():
    """Change password after confirming the current one."""
    try:
        data = get_json_fields()

        if not data or not all(k in data for k in ['email', 'current_password', 'new_password']):
            return jsonify({'error': 'Email, current_password and new_password are required'}), 400

        error = validate_password(data['new_password'])
        if error:
            return jsonify({'error': error}), 400

        if not _credentials_ok(data, 'current_password'):
            return jsonify({'error': 'Invalid email or password'}), 401

        user = accounts.authenticate(data['email'], data['current_password'])
        if not user:
            return jsonify({'error': 'Invalid email or password'}), 401

        accounts.update_account(user, password=data['new_password'])
        current_app.logger.info(f"Password changed for user_id: {user.id}")

        return jsonify({'message': 'Password changed successfully'}), 200
    except Exception:
        db.session.rollback()
        raise


@auth_bp.route('/delete-account', methods=['DELETE'])
@limiter.limit("5 per minute")
def delete_account():
    """Delete the caller's own account after confirming the password."""
    try:
        data = get_json_fields()

        if not data or not all(k in data for k in ['email', 'password']):
            return jsonify({'error': 'Email and password are required'}), 400

        if not _credentials_ok(data, 'password'):
            return jsonify({'error': 'Invalid email or password'}), 401

        user = accounts.authenticate(data['email'], data['password'])
        if not user:
            return jsonify({'error': 'Invalid email or password'}), 401

        user_id = user.id
        accounts.delete_account(user)
        current_app.logger.info(f"Account deleted for user_id: {user_id}")

        return jsonify({'message': 'Account deleted successfully'}), 200
    except Exception:
        db.session.rollback()
        raise
