from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
limiter = Limiter(key_func=get_remote_address)


def _database_url():
    url = os.getenv('DATABASE_URL', 'sqlite:///recipes.db')
    # Heroku/Render style URLs are rejected by SQLAlchemy 1.4+
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _optional_int(name):
    value = os.getenv(name, '').strip()
    return int(value) if value else None


def create_app(config_name='development', overrides=None):
    app = Flask(__name__)

    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_url()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    # Dead pooled connections are replaced transparently instead of surfacing as request errors
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {'pool_pre_ping': True, 'pool_recycle': 300}
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_ACCESS_TOKEN_EXPIRES'] = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 86400))
    app.config['CORS_ORIGINS'] = os.getenv('CORS_ORIGINS', '*')
    app.config['RATELIMIT_STORAGE_URI'] = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    # Recipe translation proxy
    app.config['TRANSLATION_SERVICE'] = os.getenv('TRANSLATION_SERVICE', 'google')
    app.config['GOOGLE_TRANSLATE_API_KEY'] = os.getenv('GOOGLE_TRANSLATE_API_KEY', '')
    app.config['DEEPL_API_KEY'] = os.getenv('DEEPL_API_KEY', '')
    app.config['TRANSLATION_TARGET_LANG'] = os.getenv('TRANSLATION_TARGET_LANG', 'pt')
    app.config['TRANSLATION_TIMEOUT'] = float(os.getenv('TRANSLATION_TIMEOUT', 5))
    app.config['TRANSLATION_MAX_WORKERS'] = int(os.getenv('TRANSLATION_MAX_WORKERS', 8))
    app.config['RECIPE_SOURCE_URL'] = os.getenv(
        'RECIPE_SOURCE_URL', 'https://www.themealdb.com/api/json/v1/1'
    )
    app.config['RECIPE_SOURCE_TIMEOUT'] = float(os.getenv('RECIPE_SOURCE_TIMEOUT', 5))
    app.config['RECIPE_CACHE_BACKEND'] = os.getenv('RECIPE_CACHE_BACKEND', 'database')
    app.config['RECIPE_CACHE_TTL'] = _optional_int('RECIPE_CACHE_TTL')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {}
        app.config['RATELIMIT_ENABLED'] = False

    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Initialize extensions
    db.init_app(app)
    limiter.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    from app import models  # noqa: F401  (registers tables on db.metadata)

    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            app.logger.warning(f"Could not create database tables: {e}")

    from app.services.recipe_translator import build_recipe_translator
    app.extensions['recipe_translator'] = build_recipe_translator(app.config)

    from app.routes import register_routes
    register_routes(app)

    register_error_handlers(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app


def register_error_handlers(app):
    """Render framework-level errors as JSON bodies."""

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({'error': 'Too many requests'}), 429

    @app.errorhandler(500)
    def internal_error(e):
        db.session.rollback()
        return jsonify({'error': 'Internal server error'}), 500
