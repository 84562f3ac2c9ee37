"""
Authentication service: registration, credential checks and API tokens.

API tokens are signed with the application secret key and carry the user
id and the user's token version; they expire after ``API_TOKEN_MAX_AGE``
seconds. Logging out of the API bumps the version, which revokes every token
issued to that user before.
"""
import logging

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.exc import SQLAlchemyError

from digforweb.exceptions import AuthError, TransportError, ValidationError
from digforweb.extensions import db
from digforweb.models.user import User
from digforweb.services.permissions import normalize_role

logger = logging.getLogger(__name__)

TOKEN_SALT = 'digforweb-api-token'
MIN_PASSWORD_LENGTH = 6


def register_user(name, email, password, role, contact=None):
    """
    Register a new user.

    Raises:
        ValidationError: missing fields, short password, unknown role or
            duplicate email
    """
    email = (email or '').strip().lower()
    name = (name or '').strip()
    canonical_role = normalize_role(role)

    errors = {}
    if not name:
        errors['name'] = ['This field is required.']
    if not email:
        errors['email'] = ['This field is required.']
    elif User.query.filter_by(email=email).first():
        errors['email'] = ['This email is already registered.']
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        errors['password'] = [f'Password must be at least {MIN_PASSWORD_LENGTH} characters.']
    if canonical_role is None:
        errors['role'] = [f'Unknown role: {role!r}']
    if errors:
        raise ValidationError(errors)

    user = User(name=name, email=email, contact=(contact or '').strip(), role=canonical_role)
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to register {email}: {e}')
        raise TransportError()

    logger.info(f'Registered user {email} as {canonical_role}')
    return user


def authenticate(email, password):
    """
    Return the active user matching the credentials.

    Raises:
        AuthError: unknown email, wrong password or inactive account
    """
    email = (email or '').strip().lower()
    user = User.query.filter_by(email=email).first()

    if user is None or not user.check_password(password or ''):
        logger.warning(f'Failed login attempt for {email}')
        raise AuthError()
    if not user.is_active:
        logger.warning(f'Login attempt for inactive account {email}')
        raise AuthError('This account has been deactivated.')
    return user


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def issue_token(user):
    return _serializer().dumps({'uid': user.id, 'ver': user.token_version or 0})


def revoke_tokens(user):
    """Invalidate every API token issued to ``user`` so far."""
    user.token_version = (user.token_version or 0) + 1
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Failed to revoke tokens of {user.email}: {e}')
        raise TransportError()
    logger.info(f'Revoked API tokens of {user.email}')


def verify_token(token):
    """
    Resolve a bearer token to its user.

    Raises:
        AuthError: invalid, expired, revoked or orphaned token
    """
    try:
        data = _serializer().loads(token, max_age=current_app.config['API_TOKEN_MAX_AGE'])
    except SignatureExpired:
        raise AuthError('Token has expired.')
    except BadSignature:
        raise AuthError('Invalid token.')

    user = db.session.get(User, data.get('uid'))
    if user is None or not user.is_active:
        raise AuthError('Invalid token.')
    if data.get('ver') != (user.token_version or 0):
        raise AuthError('Token has been revoked.')
    return user
