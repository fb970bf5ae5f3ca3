from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ...config.settings import get_settings

settings = get_settings()
DATABASE_URL = settings.get_database_url()


def build_engine(database_url: str):
    """Create an engine; SQLite needs cross-thread access for the FastAPI threadpool."""
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url == "sqlite://":
            # one shared connection, otherwise every pooled connection sees an empty database
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


# SQL statement logging is switched on through DATABASE_ECHO in logging_config.
engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
