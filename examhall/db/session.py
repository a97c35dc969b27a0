# examhall/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from examhall.core.config import settings

# SQLite needs this to share a connection across FastAPI's threadpool
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
