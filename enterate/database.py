from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from supabase import create_client, Client
from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv
from contextlib import contextmanager
import logging

load_dotenv()

logger = logging.getLogger(__name__)

# Local device storage (key-value table in SQLite)
LOCAL_DATABASE_URL = os.getenv("LOCAL_DATABASE_URL", "sqlite:///./enterate_local.db")
# Direct Postgres URL of the Supabase project, only used to bootstrap the schema
DATABASE_URL = os.getenv("DATABASE_URL")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

Base = declarative_base()


@dataclass
class Settings:
    """Runtime configuration for the storage layer"""

    local_database_url: str = LOCAL_DATABASE_URL
    database_url: Optional[str] = DATABASE_URL
    supabase_url: Optional[str] = SUPABASE_URL
    supabase_anon_key: Optional[str] = SUPABASE_ANON_KEY

    events_table: str = "events"
    comments_table: str = "comments"
    interactions_table: str = "event_interactions"
    users_table: str = "users"
    points_table: str = "event_points"

    email_delay_seconds: float = 2.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            local_database_url=os.getenv("LOCAL_DATABASE_URL", LOCAL_DATABASE_URL),
            database_url=os.getenv("DATABASE_URL"),
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY"),
            events_table=os.getenv("ENTERATE_EVENTS_TABLE", "events"),
            comments_table=os.getenv("ENTERATE_COMMENTS_TABLE", "comments"),
            interactions_table=os.getenv(
                "ENTERATE_INTERACTIONS_TABLE", "event_interactions"
            ),
            users_table=os.getenv("ENTERATE_USERS_TABLE", "users"),
            points_table=os.getenv("ENTERATE_POINTS_TABLE", "event_points"),
            email_delay_seconds=float(os.getenv("EMAIL_SIMULATED_DELAY_SECONDS", "2.0")),
        )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


# SQLAlchemy setup for the local key-value store
def create_local_engine(url: str = LOCAL_DATABASE_URL) -> Engine:
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker):
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_local_db(engine: Engine):
    """Create the local storage tables"""
    from .models import LocalEntry  # noqa: F401

    Base.metadata.create_all(bind=engine)


# Supabase client setup
def create_supabase_client(settings: Settings) -> Optional[Client]:
    """Create the Supabase client, or None when the project is not configured"""
    if not settings.supabase_configured:
        logger.info("Supabase not configured, using local storage only")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_anon_key)
    except Exception as e:
        logger.warning(f"Could not create Supabase client: {e}")
        return None
