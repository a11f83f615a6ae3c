import os
from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from app import config


def create_db_engine(url):
    """Create an engine, with thread and lock-wait settings for SQLite."""
    if make_url(url).get_backend_name() == "sqlite":
        return create_engine(
            url, connect_args={"check_same_thread": False, "timeout": 30}
        )
    return create_engine(url, pool_pre_ping=True)


engine = create_db_engine(config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_database():
    # pylint: disable=import-outside-toplevel,unused-import
    from app.models import activity, booking, profile, room, user  # noqa: F401
    from app.seed import seed_reference_data

    url = make_url(config.DATABASE_URL)
    if url.get_backend_name() == "sqlite" and url.database:
        directory = os.path.dirname(url.database)
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
    Base.metadata.create_all(bind=engine)

    if config.SEED_REFERENCE_DATA:
        db = SessionLocal()
        try:
            seed_reference_data(db)
        finally:
            db.close()


def get_db():
    """Provide a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
