"""
Authentication Middleware - access decorators for catalog routes
"""
from functools import wraps
from flask_login import current_user

from exceptions import AuthenticationException, AuthorizationException


def access_required(access_type):
    """Require an authenticated caller holding *access_type* ('user' or 'admin')"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthenticationException()

            if not current_user.has_access(access_type):
                raise AuthorizationException(f"{access_type.capitalize()} access required")

            return f(*args, **kwargs)
        return decorated_function
    return decorator
