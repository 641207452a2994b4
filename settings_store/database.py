import os

from dotenv import load_dotenv
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create the engine a DbSettings store runs its statements on."""
    url = database_url or DATABASE_URL
    if not url:
        raise ValueError(
            "No database URL configured (set SETTINGS_DATABASE_URL or DATABASE_URL)"
        )

    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every checkout sees an empty database
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        url,
        echo=False,  # Set to True to log statements
        pool_pre_ping=True,
    )
