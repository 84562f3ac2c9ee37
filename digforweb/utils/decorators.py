"""
Custom decorators for authentication and authorization.
"""
from functools import wraps
from flask import request, flash, redirect, url_for, abort, g
from flask_login import current_user

from digforweb.exceptions import AuthError
from digforweb.services.permissions import permissions_for


def require_permission(operation):
    """
    Decorator to require that the current user's role allows an operation.

    Args:
        operation: 'create', 'update', 'delete' or 'view'

    Usage:
        @require_permission('delete')
        def delete_case(case_id):
            ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                flash('Please log in to access this page.', 'warning')
                return redirect(url_for('auth.login'))

            if not permissions_for(current_user.role).allows(operation):
                flash('Your role does not allow this action.', 'danger')
                abort(403)

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def token_required(f):
    """
    Decorator for REST API routes: resolve the ``Authorization: Bearer``
    token to a user and expose it as ``g.api_user``.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from digforweb.services.auth_service import verify_token

        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() != 'bearer' or not token.strip():
            raise AuthError('Missing bearer token.')

        g.api_user = verify_token(token.strip())
        return f(*args, **kwargs)
    return decorated_function
