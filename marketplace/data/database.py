# marketplace/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from marketplace.utils.settings import DATABASE_URL, SQL_ECHO


def build_engine(url: str = DATABASE_URL, echo: bool = SQL_ECHO):
    connect_args = {}
    #sqlite: sesja moze byc zamykana w innym watku threadpoola fastapi
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
