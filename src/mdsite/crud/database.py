"""Engine construction and schema setup for the state database"""

from sqlmodel import Session, SQLModel, create_engine

from mdsite.crud.tables import RepositoryState  # noqa: F401  (registers the table)


def make_engine(db_url: str):
    return create_engine(db_url, echo=False)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)


def reset_db(engine) -> None:
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


def session_scope(engine) -> Session:
    return Session(engine)
