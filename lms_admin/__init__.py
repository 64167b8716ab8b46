"""
GrowthMindz Admin - Flask Application Factory
Admin API for the GrowthMindz learning platform
"""
import os
import logging
import traceback
from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy
from werkzeug.exceptions import HTTPException

from .config import config
from .database import SchemaCatalog, SchemaReconciler

db = SQLAlchemy()


def create_app(config_name=None, overrides=None):
    """
    Application factory pattern.

    The schema reconciler runs before the app is returned, so a served
    request never sees a half-migrated schema.
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    if overrides:
        app.config.update(overrides)

    if config_name == 'production':
        config[config_name].validate()

    # Setup logging
    _setup_logging(app)

    # Initialize extensions
    _init_extensions(app)

    # Bring the schema up to date before any blueprint can serve
    _init_schema(app)

    # Register blueprints
    _register_blueprints(app)

    # Register error handlers
    _register_error_handlers(app)

    return app


def _init_extensions(app):
    """Initialize Flask extensions"""
    # CORS - Allow admin frontend
    CORS(app, resources={
        r"/api/*": {
            "origins": app.config.get('CORS_ORIGINS', ['*']),
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "supports_credentials": True
        }
    })

    # Database
    db.init_app(app)

    # Password hashing
    app.bcrypt = Bcrypt(app)

    # Rate Limiting
    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        default_limits=[app.config.get('RATELIMIT_DEFAULT', '200 per minute')],
        storage_uri=app.config.get('RATELIMIT_STORAGE_URI', 'memory://')
    )
    app.limiter = limiter


def _init_schema(app):
    """Reconcile the schema and publish the probed shape to services"""
    with app.app_context():
        engine = db.engine
        catalog = SchemaCatalog(engine, app.logger)
        app.extensions['schema_catalog'] = catalog

        if app.config.get('SCHEMA_RECONCILE_ON_STARTUP', True):
            report = SchemaReconciler(engine, app.logger).reconcile()
            app.extensions['schema_reconcile_report'] = report
            catalog.invalidate()
        else:
            app.logger.info('Schema reconciliation disabled; using the schema as found')


def _register_blueprints(app):
    """Register all API blueprints"""
    from .routes.auth import auth_bp
    from .routes.admin import admin_bp
    from .routes.courses import courses_bp, course_videos_bp
    from .routes.staff import staff_bp
    from .routes.quizzes import quizzes_bp

    app.register_blueprint(auth_bp, url_prefix='/api/admin')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(courses_bp, url_prefix='/api/admin/courses')
    app.register_blueprint(course_videos_bp, url_prefix='/api/admin/course-videos')
    app.register_blueprint(staff_bp, url_prefix='/api/admin/staff')
    app.register_blueprint(quizzes_bp, url_prefix='/api/quizzes')

    # Health check
    @app.route('/health')
    def health_check():
        catalog = app.extensions['schema_catalog']
        report = app.extensions.get('schema_reconcile_report')
        return jsonify({
            'status': 'healthy',
            'app': app.config.get('APP_NAME'),
            'version': app.config.get('VERSION'),
            'schema': catalog.shape().summary(),
            'reconcile': report.as_dict() if report else None
        })


def _register_error_handlers(app):
    """Register global error handlers"""
    from .utils.exceptions import AdminAPIException, ValidationException

    @app.errorhandler(AdminAPIException)
    def handle_admin_api_exception(error):
        body = {
            'success': False,
            'error': error.message,
            'code': error.code
        }
        if isinstance(error, ValidationException) and error.fields:
            body['fields'] = error.fields
        if app.debug and error.details:
            body['details'] = error.details
        if error.status_code >= 500:
            app.logger.error(f'{error.code}: {error.details}')
        return jsonify(body), error.status_code

    @app.errorhandler(404)
    def handle_404(error):
        return jsonify({
            'success': False,
            'error': 'The requested endpoint does not exist',
            'code': 'ENDPOINT_NOT_FOUND'
        }), 404

    @app.errorhandler(405)
    def handle_405(error):
        return jsonify({
            'success': False,
            'error': 'Method not allowed',
            'code': 'METHOD_NOT_ALLOWED'
        }), 405

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return error
        app.logger.error(f'Internal server error: {error}')
        app.logger.error(traceback.format_exc())
        return jsonify({
            'success': False,
            'error': 'Server error',
            'code': 'INTERNAL_ERROR',
            'details': str(error) if app.debug else None
        }), 500


def _setup_logging(app):
    """Configure application logging"""
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if app.debug else logging.INFO)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    )
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
