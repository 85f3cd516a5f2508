"""Middleware for authentication and role context."""
import logging
from functools import wraps

import jwt
from flask import g, request, current_app

from pantrypal.database import get_session
from pantrypal.exceptions import UnauthorizedError, ForbiddenError, ValidationError
from pantrypal.models import User, UserRole
from pantrypal.utils.parsing import parse_int

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> dict:
    """
    Verify a bearer token issued by the auth service.

    Returns:
        The payload, with ``role`` parsed into UserRole

    Raises:
        UnauthorizedError: bad signature, expired, missing claims or a malformed userId
        ForbiddenError: role outside the known set
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config.get('JWT_ALGORITHM', 'HS256')],
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e}")
        raise UnauthorizedError()

    if 'userId' not in payload or 'role' not in payload:
        raise UnauthorizedError()

    try:
        payload['userId'] = parse_int(payload['userId'], 'userId')
    except ValidationError:
        raise UnauthorizedError()

    try:
        payload['role'] = UserRole(payload['role'])
    except ValueError:
        logger.warning(f"Token for user {payload['userId']} carries unknown role {payload['role']!r}")
        raise ForbiddenError()
    return payload


def load_current_user():
    """
    Load the authenticated user into g (Flask's per-request global).

    Sets g.user and g.user_role when a valid bearer token is present, None otherwise.
    Invalid tokens are only rejected by require_role so public routes keep working.
    """
    g.user = None
    g.user_role = None
    g.auth_error = None

    auth_header = request.headers.get('Authorization', '')
    if not auth_header:
        return

    scheme, _, token = auth_header.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        g.auth_error = UnauthorizedError()
        return

    try:
        payload = decode_access_token(token.strip())
    except (UnauthorizedError, ForbiddenError) as e:
        g.auth_error = e
        return

    user = get_session().query(User).filter(User.id == payload['userId']).first()
    if user is None:
        g.auth_error = UnauthorizedError()
        return

    # The stored role is authoritative; a token claiming another role is refused
    if user.role is not payload['role']:
        g.auth_error = ForbiddenError()
        return

    g.user = user
    g.user_id = user.id
    g.user_role = user.role


def require_role(role: UserRole):
    """
    Decorator: require an authenticated user holding ``role``.

    Raises UnauthorizedError without valid credentials, ForbiddenError for other roles.
    """
    if not isinstance(role, UserRole):
        raise TypeError(f'require_role expects a UserRole, got {role!r}')

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if g.get('user') is None:
                error = g.get('auth_error')
                if isinstance(error, ForbiddenError):
                    raise error
                raise UnauthorizedError(
                    'No token provided' if error is None else error.message
                )
            if g.user_role is not role:
                raise ForbiddenError()
            return f(*args, **kwargs)
        return decorated_function
    return decorator
