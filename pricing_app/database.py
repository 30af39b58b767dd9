"""Catalog database wiring: one engine per app and a request-scoped session."""
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base

# Create SQLAlchemy base
Base = declarative_base()

# Global session and engine
engine = None
db_session = None


def init_db(app):
    """Bind the catalog engine and session to the app's SQLALCHEMY_DATABASE_URI."""
    global engine, db_session
    
    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    engine_options = dict(app.config.get('SQLALCHEMY_ENGINE_OPTIONS') or {})
    if not database_uri.startswith('sqlite'):
        engine_options.setdefault('pool_size', 10)
        engine_options.setdefault('max_overflow', 20)
    
    engine = create_engine(
        database_uri,
        echo=app.config.get('SQLALCHEMY_ECHO', False),
        pool_pre_ping=True,  # Enable connection health checks
        **engine_options
    )
    
    db_session = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )
    
    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Return the request's session; a failed request rolls back first."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_tables():
    """Create catalog tables on the configured engine."""
    # Import models so they register with Base.metadata
    from pricing_app import models  # noqa: F401
    Base.metadata.create_all(bind=engine)