from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def create_app(config_name='development', config_overrides=None):
    app = Flask(__name__)

    # Config
    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
    else:
        app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///mealcoach.db')

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 2592000))
    app.json.ensure_ascii = False

    # Food database (Edamam)
    app.config['EDAMAM_APP_ID'] = os.getenv('EDAMAM_APP_ID')
    app.config['EDAMAM_APP_KEY'] = os.getenv('EDAMAM_APP_KEY')
    app.config['EDAMAM_API_URL'] = os.getenv(
        'EDAMAM_API_URL', 'https://api.edamam.com/api/food-database/v2/parser'
    )
    app.config['FOOD_API_TIMEOUT'] = float(os.getenv('FOOD_API_TIMEOUT', 10))

    # Translation (DeepL)
    app.config['DEEPL_API_KEY'] = os.getenv('DEEPL_API_KEY')
    app.config['DEEPL_API_URL'] = os.getenv('DEEPL_API_URL', 'https://api-free.deepl.com/v2/translate')
    app.config['TRANSLATION_TIMEOUT'] = float(os.getenv('TRANSLATION_TIMEOUT', 10))
    app.config['TRANSLATION_CACHE_EXPIRY'] = int(os.getenv('TRANSLATION_CACHE_EXPIRY', 24 * 60 * 60))

    # Nutrition analysis (OpenAI)
    app.config['OPENAI_API_KEY'] = os.getenv('OPENAI_API_KEY')
    app.config['OPENAI_MODEL'] = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')

    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(level=app.config['LOG_LEVEL'].upper(), format=LOG_FORMAT)

    # Initialize extensions
    db.init_app(app)
    CORS(app)

    # One translation cache per direction, shared by every request in this process
    from mealcoach.services.translation_cache import TranslationCache
    expiry = app.config['TRANSLATION_CACHE_EXPIRY']
    app.extensions['mealcoach'] = {
        'ja_to_en_cache': TranslationCache(expiry_seconds=expiry, name='ja_to_en'),
        'en_to_ja_cache': TranslationCache(expiry_seconds=expiry, name='en_to_ja'),
    }

    # Create tables with error handling
    with app.app_context():
        from mealcoach import models  # noqa: F401
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    # Register routes
    from mealcoach.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
