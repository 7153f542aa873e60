"""Paths of the first API version, served by the same views as the current ones.

    /usuarios, /usuarios/<id>      -> /api/users
    /login                         -> /api/auth/login
    /api/user/change-password      -> /api/auth/change-password
    /api/user/delete-account       -> /api/auth/delete-account
"""

from flask import Blueprint

from app.routes import users
from app.routes.auth import core, password

legacy_bp = Blueprint('legacy', __name__)

legacy_bp.add_url_rule('/usuarios', 'list_users', users.list_users, methods=['GET'])
legacy_bp.add_url_rule('/usuarios', 'create_user', users.create_user, methods=['POST'])
legacy_bp.add_url_rule('/usuarios/<user_id>', 'get_user', users.get_user, methods=['GET'])
legacy_bp.add_url_rule('/usuarios/<user_id>', 'update_user', users.update_user, methods=['PUT'])
legacy_bp.add_url_rule('/usuarios/<user_id>', 'delete_user', users.delete_user, methods=['DELETE'])
legacy_bp.add_url_rule('/login', 'login', core.login, methods=['POST'])
legacy_bp.add_url_rule(
    '/api/user/change-password', 'change_password', password.change_password, methods=['POST']
)
legacy_bp.add_url_rule(
    '/api/user/delete-account', 'delete_account', password.delete_account, methods=['DELETE']
)
