"""Shared authentication utilities.

JWT helpers and decorators used by every route file that needs the current
user. Tokens are HS256-signed with the app's JWT_SECRET_KEY and carry the
user id in the `user_id` claim.
"""

from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app
import jwt


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def create_access_token(user):
    """Issue a signed access token for the user."""
    expires_in = current_app.config['JWT_ACCESS_TOKEN_EXPIRES']
    payload = {
        'user_id': user.id,
        'email': user.email,
        'exp': datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    }
    return jwt.encode(payload, _get_secret_key(), algorithm='HS256')


def _decode_user_id(auth_header):
    """Return the user id from an Authorization header. Raises jwt errors."""
    # Support both "Bearer <token>" and raw token formats
    token = auth_header.split(' ')[1] if ' ' in auth_header else auth_header
    payload = jwt.decode(token, _get_secret_key(), algorithms=['HS256'])
    return payload['user_id']


def token_required(f):
    """
    Reject the request with 401 unless it carries a valid bearer token.

    The user id from the token is passed as the first positional argument:

        @meals_bp.route('', methods=['GET'])
        @token_required
        def get_meals(current_user_id):
            ...
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        
        if not auth_header:
            return jsonify({'error': '認証が必要です'}), 401
        
        try:
            current_user_id = _decode_user_id(auth_header)
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError, IndexError):
            return jsonify({'error': 'Token is invalid'}), 401
        
        return f(current_user_id, *args, **kwargs)
    return decorated


def token_optional(f):
    """Like token_required, but passes None instead of rejecting the request."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')
        current_user_id = None
        
        if auth_header:
            try:
                current_user_id = _decode_user_id(auth_header)
            except (jwt.InvalidTokenError, KeyError, IndexError):
                current_user_id = None  # Token invalid, but that's ok - it's optional
        
        return f(current_user_id, *args, **kwargs)
    return decorated
