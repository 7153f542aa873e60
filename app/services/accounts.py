"""Account store: user CRUD and password checks on top of the User model."""
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from app import db
from app.models import User

# Compared against when the email is unknown so both login failure paths hash once
_DUMMY_PASSWORD_HASH = generate_password_hash('not-a-real-password')


class EmailAlreadyRegistered(Exception):
    """Another account already uses this email."""


def normalize_email(email):
    return email.strip().lower()


def list_accounts():
    return User.query.order_by(User.created_at).all()


def find_by_id(user_id):
    return db.session.get(User, user_id)


def find_by_email(email):
    return User.query.filter_by(email=normalize_email(email)).first()


def create_account(email, password):
    """Create and persist a new account."""
    email = normalize_email(email)
    if find_by_email(email):
        raise EmailAlreadyRegistered(email)

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent registration
        db.session.rollback()
        raise EmailAlreadyRegistered(email) from e
    return user


def update_account(user, email=None, password=None):
    """Change email and/or password. Passwords are re-hashed."""
    if email is not None:
        email = normalize_email(email)
        if email != user.email:
            existing = find_by_email(email)
            if existing and existing.id != user.id:
                raise EmailAlreadyRegistered(email)
            user.email = email
    if password is not None:
        user.set_password(password)
    user.updated_at = datetime.utcnow()
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise EmailAlreadyRegistered(email) from e
    return user


def delete_account(user):
    db.session.delete(user)
    db.session.commit()


def authenticate(email, password):
    """Return the user if ``password`` matches, otherwise None."""
    user = find_by_email(email)
    if user is None:
        check_password_hash(_DUMMY_PASSWORD_HASH, password)
        return None
    if not user.check_password(password):
        return None
    return user
