# motorph/__init__.py
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from config import config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_name='default'):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])

    # Initialize app-specific configuration (logging, etc.)
    config[config_name].init_app(app)

    db.init_app(app)
    migrate.init_app(app, db, directory=app.config.get('MIGRATION_DIR'))

    # --- Register Blueprints ---
    from .payroll import bp as payroll_bp
    app.register_blueprint(payroll_bp)

    # --- Register Error Handlers ---
    from .errors import PayrollError, ValidationError, NotFoundError

    @app.errorhandler(PayrollError)
    def payroll_error(error):
        if isinstance(error, ValidationError):
            status = 400
        elif isinstance(error, NotFoundError):
            status = 404
        else:
            app.logger.error('Payroll calculation defect: %s', error.message)
            status = 500
        return jsonify(error.to_dict()), status

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'error': 'Not found', 'error_code': 'NOT_FOUND', 'details': {}}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal server error', 'error_code': 'INTERNAL_ERROR', 'details': {}}), 500

    return app
