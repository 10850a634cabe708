"""Meal record routes: list, create, read, update and delete the user's meals."""

from flask import Blueprint, request, jsonify
from mealcoach import db
from mealcoach.utils.dates import utcnow
from mealcoach.models import MealRecord, FoodItem
from mealcoach.models.meal import MEAL_TYPES, FOOD_UNITS
from mealcoach.utils import token_required
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

meals_bp = Blueprint('meals', __name__)

NUTRIENT_FIELDS = ('calories', 'protein', 'fat', 'carbohydrate')


def parse_datetime(value):
    """Parse an ISO-8601 string to a naive UTC datetime. Raises ValueError."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError('invalid date')
    parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_item(item):
    """Validate one food item. Returns (fields, error)."""
    if not isinstance(item, dict):
        return None, '食品の形式が正しくありません'
    
    name = item.get('name')
    if not isinstance(name, str) or not name.strip():
        return None, '食品名を入力してください'
    
    quantity = item.get('quantity')
    if not _is_number(quantity) or quantity < 0:
        return None, '0以上の数値を入力してください'
    
    unit = item.get('unit')
    if unit not in FOOD_UNITS:
        return None, f"単位は {', '.join(FOOD_UNITS)} のいずれかを指定してください"
    
    fields = {'name': name.strip(), 'quantity': quantity, 'unit': unit}
    for field in NUTRIENT_FIELDS:
        value = item.get(field)
        if value is None:
            fields[field] = 0
        elif not _is_number(value) or value < 0:
            return None, f'{field} は0以上の数値を入力してください'
        else:
            fields[field] = value
    return fields, None


def parse_meal_payload(data):
    """Validate a meal record body. Returns (fields, error)."""
    if not isinstance(data, dict):
        return None, 'リクエストの形式が正しくありません'
    
    meal_type = data.get('mealType')
    if meal_type not in MEAL_TYPES:
        return None, f"食事の種類は {', '.join(MEAL_TYPES)} のいずれかを指定してください"
    
    items = data.get('items')
    if not isinstance(items, list):
        return None, '食品リストを指定してください'
    
    parsed_items = []
    for item in items:
        fields, error = _parse_item(item)
        if error:
            return None, error
        parsed_items.append(fields)
    
    if data.get('date'):
        try:
            date = parse_datetime(data['date'])
        except ValueError:
            return None, '日付の形式が正しくありません'
    else:
        date = utcnow()
    
    photo_url = data.get('photoUrl')
    if photo_url is not None and not isinstance(photo_url, str):
        return None, '写真URLの形式が正しくありません'
    
    return {
        'meal_type': meal_type,
        'date': date,
        'photo_url': photo_url,
        'items': parsed_items
    }, None


def _get_own_meal(meal_id, current_user_id):
    """The meal if it exists and belongs to the user, else None."""
    meal = MealRecord.query.get(meal_id)
    if not meal or meal.user_id != current_user_id:
        return None
    return meal


@meals_bp.route('', methods=['GET'])
@token_required
def get_meals(current_user_id):
    """Get the user's meal records, newest first.
    
    Query params:
        - start, end: Optional ISO-8601 bounds on the meal date (inclusive)
    """
    try:
        query = MealRecord.query.filter_by(user_id=current_user_id)
        
        try:
            if request.args.get('start'):
                query = query.filter(MealRecord.date >= parse_datetime(request.args['start']))
            if request.args.get('end'):
                query = query.filter(MealRecord.date <= parse_datetime(request.args['end']))
        except ValueError:
            return jsonify({'error': '日付の形式が正しくありません'}), 400
        
        meals = query.order_by(MealRecord.date.desc()).all()
        return jsonify([meal.to_dict() for meal in meals]), 200
    except Exception as e:
        logger.error(f'Error fetching meal records: {e}', exc_info=True)
        return jsonify({'error': '食事記録の取得に失敗しました'}), 500


@meals_bp.route('', methods=['POST'])
@token_required
def create_meal(current_user_id):
    """Create a meal record with its food items."""
    try:
        fields, error = parse_meal_payload(request.get_json(silent=True))
        if error:
            return jsonify({'error': error}), 400
        
        meal = MealRecord(
            user_id=current_user_id,
            meal_type=fields['meal_type'],
            date=fields['date'],
            photo_url=fields['photo_url'],
            items=[FoodItem(**item) for item in fields['items']]
        )
        
        db.session.add(meal)
        db.session.commit()
        
        return jsonify(meal.to_dict()), 201
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error creating meal record: {e}', exc_info=True)
        return jsonify({'error': '食事記録の作成に失敗しました'}), 500


@meals_bp.route('/<int:meal_id>', methods=['GET'])
@token_required
def get_meal(current_user_id, meal_id):
    """Get a specific meal record by ID."""
    try:
        meal = _get_own_meal(meal_id, current_user_id)
        if not meal:
            return jsonify({'error': '食事記録が見つかりません'}), 404
        
        return jsonify(meal.to_dict()), 200
    except Exception as e:
        logger.error(f'Error fetching meal record {meal_id}: {e}', exc_info=True)
        return jsonify({'error': '食事記録の取得に失敗しました'}), 500


@meals_bp.route('/<int:meal_id>', methods=['PUT'])
@token_required
def update_meal(current_user_id, meal_id):
    """Replace a meal record's fields and food items."""
    try:
        meal = _get_own_meal(meal_id, current_user_id)
        if not meal:
            return jsonify({'error': '食事記録が見つかりません'}), 404
        
        fields, error = parse_meal_payload(request.get_json(silent=True))
        if error:
            return jsonify({'error': error}), 400
        
        meal.meal_type = fields['meal_type']
        meal.date = fields['date']
        meal.photo_url = fields['photo_url']
        # delete-orphan cascade removes the old items
        meal.items = [FoodItem(**item) for item in fields['items']]
        meal.updated_at = utcnow()
        
        db.session.commit()
        
        return jsonify(meal.to_dict()), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error updating meal record {meal_id}: {e}', exc_info=True)
        return jsonify({'error': '食事記録の更新に失敗しました'}), 500


@meals_bp.route('/<int:meal_id>', methods=['DELETE'])
@token_required
def delete_meal(current_user_id, meal_id):
    """Delete a meal record."""
    try:
        meal = _get_own_meal(meal_id, current_user_id)
        if not meal:
            return jsonify({'error': '食事記録が見つかりません'}), 404
        
        db.session.delete(meal)
        db.session.commit()
        
        return jsonify({'message': '食事記録を削除しました'}), 200
    except Exception as e:
        db.session.rollback()
        logger.error(f'Error deleting meal record {meal_id}: {e}', exc_info=True)
        return jsonify({'error': '食事記録の削除に失敗しました'}), 500
