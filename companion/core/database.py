from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from companion.core.config import DATABASE_URL, DB_ECHO

Base = declarative_base()


def make_engine(url: str = DATABASE_URL, echo: bool = DB_ECHO):
    connect_args = {}
    if url.startswith("sqlite"):
        # request handlers run in a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, future=True, connect_args=connect_args)


def make_session_factory(bind):
    # expire_on_commit=False keeps returned records readable after the transaction ends
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False, future=True)


def init_db(bind):
    # models must be imported so their tables are registered on Base.metadata
    import companion.models.patient_model  # noqa: F401

    Base.metadata.create_all(bind=bind)


engine = make_engine()
SessionLocal = make_session_factory(engine)
