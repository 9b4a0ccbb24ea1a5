from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # Sync endpoints run on the threadpool
        return create_engine(
            database_url, connect_args={"check_same_thread": False}
        )
    return create_engine(database_url)


def init_database(engine: Engine) -> None:
    # Register every model on Base before creating tables
    from task_api.audit.postgres import model as audit_model  # noqa: F401
    from task_api.auth.users.postgres import model as user_model  # noqa: F401
    from task_api.tasks.store.postgres import model as task_model  # noqa: F401

    Base.metadata.create_all(engine)


def get_db_engine(request: Request) -> Engine | None:
    return request.app.state.db_engine
