import os
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# registers the tables on SQLModel.metadata
from reclaim.models.activity_log import ActivityLog  # noqa: F401
from reclaim.models.claim import Claim  # noqa: F401
from reclaim.models.item import ItemReport  # noqa: F401

IN_MEMORY_URL = "sqlite://"


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", IN_MEMORY_URL)


def create_db_engine(url: str | None = None):
    url = url or get_database_url()

    if url.startswith("sqlite"):
        # one shared connection so an in-memory database outlives each session
        pool = StaticPool if url in (IN_MEMORY_URL, "sqlite:///:memory:") else None
        kwargs = {"connect_args": {"check_same_thread": False}}
        if pool:
            kwargs["poolclass"] = pool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(url, pool_pre_ping=True)

    SQLModel.metadata.create_all(engine)
    return engine
