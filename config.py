"""Configuration module for the Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '0') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database - Support multiple environment variable naming conventions
    # Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'pantrypal')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'pantrypal')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'pantrypal')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'
    DB_CREATE_ALL = os.getenv('DB_CREATE_ALL', 'false').lower() == 'true'

    # Tokens are issued by the auth service; this app only verifies them
    JWT_SECRET = os.getenv('JWT_SECRET', 'dev-jwt-secret-change-in-production')
    JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')

    # Sales
    CLAIM_CODE_MAX_ATTEMPTS = int(os.getenv('CLAIM_CODE_MAX_ATTEMPTS', '20'))

    # Catalogue
    PRODUCT_SEARCH_LIMIT = int(os.getenv('PRODUCT_SEARCH_LIMIT', '10'))

    # Customer reminders
    DEFAULT_REMINDER_TIME = os.getenv('DEFAULT_REMINDER_TIME', '06:00:00')


class TestingConfig(Config):
    """Configuration used by the test suite (SQLite, tables created on startup)."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///pantrypal-test.sqlite3')
    SQLALCHEMY_ECHO = False
    DB_CREATE_ALL = True
    JWT_SECRET = 'test-jwt-secret-with-enough-length-for-hs256'
