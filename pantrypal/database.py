"""Database configuration, session registry and unit of work."""
import logging
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import create_engine, BigInteger, Integer
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base

from pantrypal.exceptions import TransientStoreError

logger = logging.getLogger(__name__)

# Create SQLAlchemy base
Base = declarative_base()

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigId = BigInteger().with_variant(Integer, 'sqlite')


def create_db_engine(database_uri: str, echo: bool = False):
    """Create an engine; pool sizing only applies to server databases."""
    options = {
        'echo': echo,
        'pool_pre_ping': True,  # Enable connection health checks
    }
    if not database_uri.startswith('sqlite'):
        options.update(pool_size=10, max_overflow=20)
    return create_engine(database_uri, **options)


def create_session_factory(engine):
    """Thread-local session registry bound to ``engine``."""
    return scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )


def init_db(app):
    """Initialize database connection and attach the session registry to the app."""
    engine = create_db_engine(
        app.config['SQLALCHEMY_DATABASE_URI'],
        echo=app.config.get('SQLALCHEMY_ECHO', False),
    )
    db_session = create_session_factory(engine)

    app.extensions['db_engine'] = engine
    app.extensions['db_session'] = db_session

    if app.config.get('DB_CREATE_ALL'):
        # Import models so every table is registered on Base.metadata
        import pantrypal.models  # noqa: F401
        Base.metadata.create_all(engine)

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()

    return db_session


def get_session(app=None):
    """Get the request-scoped database session of ``app`` (defaults to current_app)."""
    app = app or current_app
    return app.extensions['db_session']


def get_engine(app=None):
    """Get the engine bound to ``app``."""
    app = app or current_app
    return app.extensions['db_engine']


@contextmanager
def atomic(session):
    """
    Run a block as one unit of work.

    Commits when the block finishes, rolls back on any exit path before the
    error propagates. Storage failures (lock timeouts, deadlocks, constraint
    races) are raised as TransientStoreError so callers can retry the request.
    """
    try:
        yield session
        session.commit()
    except (OperationalError, IntegrityError) as exc:
        session.rollback()
        logger.error(f"Unit of work rolled back on storage error: {exc.__class__.__name__}: {exc}")
        raise TransientStoreError() from exc
    except BaseException:
        session.rollback()
        raise
