import os
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_list(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    return tuple(item.strip() for item in value.split(',') if item.strip())


class Config:
    """Base configuration class."""
    # SECRET_KEY must be set via environment variable in production
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'payroll.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIGRATION_DIR = os.path.join(basedir, 'migrations')

    # Payroll rules
    PAYROLL_WORKING_DAYS_PER_MONTH = int(os.environ.get('PAYROLL_WORKING_DAYS_PER_MONTH', 22))
    PAYROLL_SHIFT_START = os.environ.get('PAYROLL_SHIFT_START', '08:00')
    PAYROLL_SHIFT_END = os.environ.get('PAYROLL_SHIFT_END', '17:00')
    PAYROLL_GRACE_MINUTES = int(os.environ.get('PAYROLL_GRACE_MINUTES', 15))
    PAYROLL_MEAL_BREAK_MINUTES = int(os.environ.get('PAYROLL_MEAL_BREAK_MINUTES', 60))
    PAYROLL_OVERTIME_MULTIPLIER = os.environ.get('PAYROLL_OVERTIME_MULTIPLIER', '1.25')
    # Rice subsidy is de minimis; phone and clothing are taxable
    PAYROLL_NON_TAXABLE_ALLOWANCES = _env_list('PAYROLL_NON_TAXABLE_ALLOWANCES', ('rice',))
    PAYROLL_MAX_WORKERS = int(os.environ.get('PAYROLL_MAX_WORKERS', 4))

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT')

    @staticmethod
    def init_app(app):
        """Initialize application-specific configuration."""
        import logging
        from logging import StreamHandler

        if app.debug or app.testing:
            return

        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        )
        if app.config.get('LOG_TO_STDOUT'):
            handler = StreamHandler()
        else:
            if not os.path.exists('logs'):
                os.mkdir('logs')
            handler = logging.FileHandler('logs/payroll.log')
        handler.setFormatter(formatter)
        handler.setLevel(logging.INFO)
        # app.logger is the 'motorph' logger, so engine modules share this handler
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.INFO)

        app.logger.info('Payroll System startup')


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False


class ProductionConfig(Config):
    DEBUG = False
    # In production, these must be set via environment variables

    @staticmethod
    def init_app(app):
        """Initialize production configuration with validation."""
        Config.init_app(app)

        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production!")

        if not os.environ.get('DATABASE_URL'):
            raise ValueError("DATABASE_URL environment variable must be set in production!")

        app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
        app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL')


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
