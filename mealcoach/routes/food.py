"""Food search: query the food database in the user's language."""

from flask import Blueprint, request, jsonify, current_app
from mealcoach.services.food_database import FoodDatabaseClient
from mealcoach.services.food_search import FoodSearchService
from mealcoach.services.translation import Translator
import logging
import time

logger = logging.getLogger(__name__)

food_bp = Blueprint('food', __name__)


def get_translator():
    """Build a translator around the app's shared per-direction caches."""
    caches = current_app.extensions['mealcoach']
    return Translator(
        api_key=current_app.config.get('DEEPL_API_KEY'),
        ja_to_en_cache=caches['ja_to_en_cache'],
        en_to_ja_cache=caches['en_to_ja_cache'],
        api_url=current_app.config['DEEPL_API_URL'],
        timeout=current_app.config['TRANSLATION_TIMEOUT'],
    )


@food_bp.route('/search', methods=['GET'])
def search_foods():
    """Search the food database.
    
    Query params:
        - query: Free-text food name, usually Japanese (required)
    
    Returns a list of foods with labels translated back to Japanese,
    at most five, most relevant first.
    """
    query = request.args.get('query', '').strip()
    if not query:
        return jsonify({'error': '検索キーワードを入力してください'}), 400
    
    app_id = current_app.config.get('EDAMAM_APP_ID')
    app_key = current_app.config.get('EDAMAM_APP_KEY')
    if not app_id or not app_key:
        logger.warning(
            f'Edamam credentials missing: EDAMAM_APP_ID={bool(app_id)}, EDAMAM_APP_KEY={bool(app_key)}'
        )
        return jsonify({'error': 'APIの認証情報が設定されていません'}), 500
    
    start = time.monotonic()
    try:
        client = FoodDatabaseClient(
            app_id,
            app_key,
            api_url=current_app.config['EDAMAM_API_URL'],
            timeout=current_app.config['FOOD_API_TIMEOUT'],
        )
        foods = FoodSearchService(get_translator(), client).search(query)
    except Exception as e:
        logger.error(f'Food search failed for query "{query}": {e}', exc_info=True)
        return jsonify({'error': '食品の検索中にエラーが発生しました'}), 500
    
    logger.info(f'Food search "{query}" returned {len(foods)} results in {time.monotonic() - start:.2f}s')
    return jsonify(foods), 200
