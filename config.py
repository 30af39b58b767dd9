"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    TESTING = False

    # Session Configuration (the quote in progress lives in the session cookie)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # CSRF (Flask-WTF); JSON clients send the token from GET /quote
    WTF_CSRF_ENABLED = os.getenv('WTF_CSRF_ENABLED', 'true').lower() == 'true'

    # Catalog database
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///pricing.db')

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', '0') == '1'
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # Catalog search
    CATALOG_DEFAULT_LIMIT = int(os.getenv('CATALOG_DEFAULT_LIMIT', '20'))
    CATALOG_SEARCH_LIMIT = int(os.getenv('CATALOG_SEARCH_LIMIT', '50'))
    CATALOG_MIN_QUERY_LENGTH = int(os.getenv('CATALOG_MIN_QUERY_LENGTH', '3'))
    SEARCH_DEBOUNCE_SECONDS = float(os.getenv('SEARCH_DEBOUNCE_SECONDS', '0.5'))

    # Quote export
    QUOTE_DEFAULT_FORMAT = os.getenv('QUOTE_DEFAULT_FORMAT', 'markdown_table')
    QUOTE_SESSION_KEY = os.getenv('QUOTE_SESSION_KEY', 'quote')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()


class TestConfig(Config):
    """In-memory catalog, CSRF off."""

    TESTING = True
    DEBUG = False
    WTF_CSRF_ENABLED = False
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    # One shared connection so every session sees the same in-memory database
    SQLALCHEMY_ENGINE_OPTIONS = {
        'poolclass': StaticPool,
        'connect_args': {'check_same_thread': False},
    }
    LOG_LEVEL = 'WARNING'
