# examhall/db/init_db.py
from examhall.db.session import engine
from examhall.db.base import Base
from examhall import models  # noqa


def init_db():
    Base.metadata.create_all(bind=engine)
