from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ...config.settings import get_settings

settings = get_settings()

SQLALCHEMY_DATABASE_URL = settings.get_database_url()

engine_kwargs = {"echo": settings.database_echo}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # FastAPI serves sync routes from a threadpool
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if ":memory:" in SQLALCHEMY_DATABASE_URL:
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
