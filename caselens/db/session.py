# caselens/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from caselens.core.config import settings


def _connect_args(url: str) -> dict:
    # sqlite connections are shared with the threadpool that runs sync routes
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
