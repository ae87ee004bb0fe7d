from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from cinebook.core.config import settings


def build_engine(url: str):
    """Create an engine for the given URL; SQLite needs cross-thread access for the API workers."""
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
