from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from eats.core.config import settings
import logging
import threading

DATABASE_URL = settings.DATABASE_URL

# SQLAlchemy connect_args differ between SQLite and other DBs (e.g. MySQL)
connect_args = {}
engine_kwargs = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
else:
    # pool_pre_ping avoids "MySQL server has gone away" on stale pooled connections
    engine_kwargs = dict(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

engine = create_engine(DATABASE_URL, connect_args=connect_args, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# --- Pool monitoring: log connects and checkouts to help diagnose excess connections ---
_pool_logger = logging.getLogger("eats.db.pool")
_connect_count = 0
_checkout_count = 0
_pool_lock = threading.Lock()


@event.listens_for(engine, "connect")
def _on_connect(dbapi_connection, connection_record):
    global _connect_count
    with _pool_lock:
        _connect_count += 1
        cnt = _connect_count
    # Log every N connects to avoid noisy output
    if cnt % settings.DB_LOG_EVERY_N == 0:
        _pool_logger.info(f"SQLAlchemy Pool CONNECT events: total opened={cnt}")


@event.listens_for(engine, "checkout")
def _on_checkout(dbapi_connection, connection_record, connection_proxy):
    global _checkout_count
    with _pool_lock:
        _checkout_count += 1
        cnt = _checkout_count
    if cnt % settings.DB_LOG_EVERY_N == 0:
        _pool_logger.info(f"SQLAlchemy Pool CHECKOUT events: total checkouts={cnt}")


def get_db():
    """FastAPI dependency that provides a scoped SQLAlchemy Session.

    The session is always closed after the request so the connection goes
    back to the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def import_models():
    # Import models here so they are registered on the metadata
    import eats.models.user  # noqa: F401
    import eats.models.restaurant  # noqa: F401
    import eats.models.dish  # noqa: F401
    import eats.models.order  # noqa: F401
    import eats.models.order_item  # noqa: F401
    import eats.models.payment  # noqa: F401


def create_db(bind=None):
    import_models()
    Base.metadata.create_all(bind=bind or engine)
