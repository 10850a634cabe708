"""Nutrition analysis: AI advice over a day's or a week's meals."""

from flask import Blueprint, request, jsonify, current_app
from mealcoach.models import MealRecord, UserProfile
from mealcoach.services.nutrition_advice import ANALYSIS_TYPES, NutritionAdvisor
from datetime import date, datetime, time, timedelta
from mealcoach.utils import token_required
import logging

logger = logging.getLogger(__name__)

analysis_bp = Blueprint('analysis', __name__)

WEEKLY_DAYS = 7


def get_date_range(analysis_type, target_date=None, today=None):
    """Return (start, end) datetimes for the analysis window.
    
    daily: the whole target date. weekly: seven days ago 00:00 through the
    end of today.
    """
    if analysis_type == 'daily':
        return datetime.combine(target_date, time.min), datetime.combine(target_date, time.max)
    
    today = today or date.today()
    start = datetime.combine(today - timedelta(days=WEEKLY_DAYS), time.min)
    return start, datetime.combine(today, time.max)


@analysis_bp.route('', methods=['POST'])
@token_required
def analyze(current_user_id):
    """Analyze the user's meals with the LLM.
    
    Body:
        - analysisType: 'daily' (default) or 'weekly'
        - date: YYYY-MM-DD, required for daily analysis
    """
    try:
        api_key = current_app.config.get('OPENAI_API_KEY')
        if not api_key:
            logger.warning('OPENAI_API_KEY is not set - analysis unavailable')
            return jsonify({'success': False, 'message': 'OpenAI APIキーが設定されていません'}), 500
        
        data = request.get_json(silent=True) or {}
        analysis_type = data.get('analysisType') or 'daily'
        if analysis_type not in ANALYSIS_TYPES:
            return jsonify({'success': False, 'message': '分析タイプが正しくありません'}), 400
        
        target_date = None
        if analysis_type == 'daily':
            if not data.get('date'):
                return jsonify({'success': False, 'message': '日付が指定されていません'}), 400
            try:
                target_date = date.fromisoformat(str(data['date'])[:10])
            except ValueError:
                return jsonify({'success': False, 'message': '日付の形式が正しくありません'}), 400
        
        start, end = get_date_range(analysis_type, target_date)
        
        meals = MealRecord.query.filter(
            MealRecord.user_id == current_user_id,
            MealRecord.date >= start,
            MealRecord.date <= end
        ).order_by(MealRecord.date.asc()).all()
        
        if not meals:
            return jsonify({'success': False, 'message': '指定期間内の食事記録が見つかりませんでした'}), 404
        
        profile = UserProfile.query.filter_by(user_id=current_user_id).first()
        
        advisor = NutritionAdvisor(api_key, model=current_app.config['OPENAI_MODEL'])
        result = advisor.analyze_meals(
            [meal.to_dict() for meal in meals],
            profile.to_dict() if profile else None,
            analysis_type
        )
        
        return jsonify({
            'success': True,
            'data': {
                'analysisType': analysis_type,
                'mealCount': len(meals),
                'result': result,
                'startDate': start.isoformat(),
                'endDate': end.isoformat()
            }
        }), 200
    except Exception as e:
        logger.error(f'Analysis failed: {e}', exc_info=True)
        return jsonify({'success': False, 'message': '分析処理中にエラーが発生しました'}), 500
