import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from enterate.database import Settings, create_session_factory, init_local_db
from enterate.services.local_store import LocalStore
from enterate.services.remote_store import RemoteStore

from .fake_supabase import FakeSupabase


@pytest.fixture
def settings() -> Settings:
    return Settings(
        local_database_url="sqlite://",
        supabase_url="https://example.supabase.co",
        supabase_anon_key="test-anon-key",
        email_delay_seconds=0,
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_local_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def local_store(session_factory) -> LocalStore:
    return LocalStore(session_factory)


@pytest.fixture
def fake_client() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def remote_store(fake_client, settings) -> RemoteStore:
    return RemoteStore(fake_client, settings)
