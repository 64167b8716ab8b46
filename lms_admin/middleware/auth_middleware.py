"""
GrowthMindz Admin - Authentication Middleware
JWT validation and user context extraction
"""
from functools import wraps
from flask import request, g, current_app
import jwt
from datetime import datetime, timezone
from ..utils.exceptions import UnauthorizedException, TokenExpiredException, InvalidTokenException


def get_current_user():
    """Get the current authenticated user from request context"""
    return getattr(g, 'current_user', None)


def require_auth(f):
    """Decorator to require authentication for a route"""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _extract_token()

        if not token:
            raise UnauthorizedException('Access denied. No token provided.')

        try:
            payload = _verify_token(token)
        except jwt.ExpiredSignatureError:
            raise TokenExpiredException('Invalid token.')
        except jwt.InvalidTokenError as e:
            current_app.logger.warning(f'Invalid token: {e}')
            raise InvalidTokenException('Invalid token.')

        # Role is trusted as issued at login
        g.current_user = {
            'id': payload.get('id'),
            'email': payload.get('email'),
            'role': payload.get('role'),
            'name': payload.get('name')
        }

        return f(*args, **kwargs)

    return decorated


def _extract_token():
    """Extract JWT token from the Authorization header"""
    auth_header = request.headers.get('Authorization')

    if auth_header:
        parts = auth_header.split()
        if len(parts) == 2 and parts[0].lower() == 'bearer':
            return parts[1]

    return None


def _verify_token(token):
    """Verify and decode JWT token"""
    secret_key = current_app.config['JWT_SECRET_KEY']

    payload = jwt.decode(
        token,
        secret_key,
        algorithms=[current_app.config.get('JWT_ALGORITHM', 'HS256')],
        options={'require': ['sub', 'exp', 'iat']}
    )

    return payload


def create_access_token(user_data: dict) -> str:
    """Create a signed, time-boxed access token carrying {id, email, role, name}"""
    secret_key = current_app.config['JWT_SECRET_KEY']
    expires_delta = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
    now = datetime.now(timezone.utc)

    payload = {
        'sub': str(user_data['id']),
        'id': user_data['id'],
        'email': user_data['email'],
        'role': user_data['role'],
        'name': user_data.get('name'),
        'iat': now,
        'exp': now + expires_delta
    }

    return jwt.encode(payload, secret_key, algorithm=current_app.config.get('JWT_ALGORITHM', 'HS256'))
