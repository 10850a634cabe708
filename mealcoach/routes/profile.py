"""Nutrition profile routes: body data and daily nutrition goals."""

from flask import Blueprint, request, jsonify
from mealcoach import db
from mealcoach.utils.dates import utcnow
from mealcoach.models import User, UserProfile
from mealcoach.models.profile import GENDERS, ACTIVITY_LEVELS, GOALS, PROFILE_FIELDS
from mealcoach.utils import token_required
from datetime import date
import logging

logger = logging.getLogger(__name__)

profile_bp = Blueprint('profile', __name__)

ENUM_FIELDS = {
    'gender': GENDERS,
    'activityLevel': ACTIVITY_LEVELS,
    'goal': GOALS,
}

# field -> (minimum, error message)
TARGET_FIELDS = {
    'targetCalories': (500, '目標カロリーは500以上を入力してください'),
    'targetProtein': (0, '目標タンパク質は0以上を入力してください'),
    'targetFat': (0, '目標脂質は0以上を入力してください'),
    'targetCarbs': (0, '目標炭水化物は0以上を入力してください'),
}

POSITIVE_FIELDS = {
    'height': '身長は0より大きい値を入力してください',
    'weight': '体重は0より大きい値を入力してください',
}


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_profile_payload(data):
    """Validate profile fields. Returns ({attr: value}, error).
    
    Only keys present in the body are returned, so a partial update leaves
    the other fields untouched. null clears a field.
    """
    if not isinstance(data, dict):
        return None, 'リクエストの形式が正しくありません'
    
    unknown = set(data.keys()) - set(PROFILE_FIELDS)
    if unknown:
        return None, f"Unknown fields: {', '.join(sorted(unknown))}"
    
    values = {}
    for key, value in data.items():
        attr = PROFILE_FIELDS[key]
        
        if value is None or value == '':
            values[attr] = None
            continue
        
        if key in ENUM_FIELDS:
            if value not in ENUM_FIELDS[key]:
                return None, f"{key} は {', '.join(ENUM_FIELDS[key])} のいずれかを指定してください"
            values[attr] = value
        elif key in POSITIVE_FIELDS:
            if not _is_number(value) or value <= 0:
                return None, POSITIVE_FIELDS[key]
            values[attr] = float(value)
        elif key in TARGET_FIELDS:
            minimum, message = TARGET_FIELDS[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
                return None, message
            values[attr] = value
        elif key == 'birthDate':
            try:
                birth_date = date.fromisoformat(str(value)[:10])
            except ValueError:
                return None, '生年月日の形式が正しくありません'
            if birth_date > date.today():
                return None, '生年月日に未来の日付は指定できません'
            values[attr] = birth_date
    
    return values, None


@profile_bp.route('', methods=['GET'])
@token_required
def get_profile(current_user_id):
    """Get the user's profile. Fields are null until the first save."""
    try:
        user = User.query.get(current_user_id)
        if not user:
            return jsonify({'success': False, 'error': 'ユーザーが見つかりません'}), 404
        
        profile = UserProfile.query.filter_by(user_id=user.id).first()
        data = profile.to_dict() if profile else UserProfile.empty_dict()
        
        return jsonify({'success': True, 'data': data}), 200
    except Exception as e:
        logger.error(f'Error fetching profile: {e}', exc_info=True)
        return jsonify({'success': False, 'error': 'プロフィールの取得に失敗しました'}), 500


@profile_bp.route('', methods=['POST'])
@token_required
def save_profile(current_user_id):
    """Create or update the user's profile."""
    try:
        user = User.query.get(current_user_id)
        if not user:
            return jsonify({'success': False, 'error': 'ユーザーが見つかりません'}), 404
        
        values, error = parse_profile_payload(request.get_json(silent=True))
        if error:
            return jsonify({'success': False, 'error': error}), 400
        
        profile = UserProfile.query.filter_by(user_id=user.id).first()
        if not profile:
            profile = UserProfile(user_id=user.id)
            db.session.add(profile)
        
        for attr, value in values.items():
            setattr(profile, attr, value)
        profile.updated_at = utcnow()
        
        db.session.commit()
        
        return jsonify({'success': True, 'data': profile.to_dict()}), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error saving profile: {e}', exc_info=True)
        return jsonify({'success': False, 'error': 'プロフィールの更新に失敗しました'}), 500
