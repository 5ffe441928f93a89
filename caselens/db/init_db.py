# caselens/db/init_db.py
import logging

from caselens.db.base import Base
from caselens.db.session import engine


def init_db(bind=None):
    # Create all tables if not exist
    from caselens import models  # noqa: F401  register mappers on Base.metadata
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    logging.info("Database tables ensured on %s", bind.url.render_as_string(hide_password=True))
