"""Core authentication routes: registration, login and auth check."""

from flask import request, jsonify
from mealcoach import db
from mealcoach.models import User
from mealcoach.routes.auth import auth_bp
from mealcoach.utils import create_access_token, token_optional
import logging
import re

logger = logging.getLogger(__name__)

# Email validation regex
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
MAX_NAME_LENGTH = 80


def _validate_registration(data):
    """Validate registration fields. Returns the first error message or None."""
    name = data.get('name')
    email = data.get('email')
    password = data.get('password')
    
    if not isinstance(name, str) or not name.strip():
        return '名前は必須です'
    if len(name.strip()) > MAX_NAME_LENGTH:
        return f'名前は{MAX_NAME_LENGTH}文字以内で入力してください'
    
    if not isinstance(email, str) or not EMAIL_REGEX.match(email.strip()):
        return '有効なメールアドレスを入力してください'
    
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return f'パスワードは{MIN_PASSWORD_LENGTH}文字以上必要です'
    if len(password) > MAX_PASSWORD_LENGTH:
        return f'パスワードは{MAX_PASSWORD_LENGTH}文字以内で入力してください'
    
    return None


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user account."""
    try:
        data = request.get_json(silent=True) or {}
        
        error = _validate_registration(data)
        if error:
            return jsonify({'success': False, 'error': error}), 400
        
        name = data['name'].strip()
        email = data['email'].strip().lower()
        
        if User.query.filter_by(email=email).first():
            return jsonify({'success': False, 'error': 'このメールアドレスは既に登録されています'}), 400
        
        user = User(name=name, email=email)
        user.set_password(data['password'])
        
        db.session.add(user)
        db.session.commit()
        
        logger.info(f'Registered user {user.id}')
        
        return jsonify({
            'success': True,
            'message': 'ユーザー登録が完了しました',
            'userId': user.id
        }), 201
    except Exception as e:
        db.session.rollback()
        logger.error(f'Registration failed: {e}', exc_info=True)
        return jsonify({'success': False, 'error': 'サーバーエラーが発生しました'}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate user and return JWT token."""
    try:
        data = request.get_json(silent=True)
        
        if not data or not all(k in data for k in ['email', 'password']):
            return jsonify({'error': 'メールアドレスとパスワードを入力してください'}), 400
        
        email = str(data['email']).strip().lower()
        user = User.query.filter_by(email=email).first()
        
        if not user or not user.check_password(data['password']):
            return jsonify({'error': 'メールアドレスまたはパスワードが正しくありません'}), 401
        
        if not user.is_active:
            return jsonify({'error': 'このアカウントは無効化されています'}), 403
        
        return jsonify({
            'message': 'ログインしました',
            'token': create_access_token(user),
            'user': user.to_dict()
        }), 200
    except Exception as e:
        logger.error(f'Login failed: {e}', exc_info=True)
        return jsonify({'error': 'サーバーエラーが発生しました'}), 500


@auth_bp.route('/check', methods=['GET'])
@token_optional
def check(current_user_id):
    """Report whether the request carries a valid token for an existing user."""
    try:
        user = User.query.get(current_user_id) if current_user_id else None
        
        return jsonify({
            'authenticated': user is not None,
            'user': user.to_dict() if user else None
        }), 200
    except Exception as e:
        logger.error(f'Auth check failed: {e}', exc_info=True)
        return jsonify({'authenticated': False, 'error': 'Authentication check failed'}), 500
