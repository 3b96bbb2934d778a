from datetime import datetime

from enterate.schemas.common import OperationResult
from enterate.schemas.event import Comment, Event
from enterate.services.migration_service import MigrationService, migrate_local_to_remote
from enterate.services.storage_backend import LocalBackend, RemoteBackend


def local_event(event_id: str, title: str, day: int, **overrides) -> Event:
    data = {
        "id": event_id,
        "title": title,
        "description": "Evento local",
        "date": "2025-06-01",
        "time": "10:00",
        "location": "Centro",
        "category": "Deportes",
        "created_by": "1",
        "created_at": datetime(2024, 5, day),
    }
    data.update(overrides)
    return Event(**data)


def test_copies_every_local_event_into_empty_remote(local_store, remote_store):
    local_count = len(local_store.list_events())

    report = migrate_local_to_remote(remote_store, local_store)

    assert report.source == "local"
    assert report.attempted == report.migrated == local_count
    assert report.failed == 0
    assert len(remote_store.list_events()) == local_count
    assert len(report.events) == local_count


def test_interactions_and_comments_follow_their_event(local_store, remote_store, fake_client):
    event = local_event(
        "100",
        "Maratón",
        3,
        likes=2,
        liked_by=["1", "2"],
        attendees=["2"],
        comments=[Comment(id="c1", event_id="100", user_id="2", content="¡Vamos!")],
    )
    local_store.save_events([event])

    migrate_local_to_remote(remote_store, local_store)

    [migrated] = remote_store.list_events()
    assert migrated.id != "100"
    assert migrated.liked_by == ["1", "2"]
    assert migrated.likes == 2
    assert migrated.attendees == ["2"]
    assert [c.content for c in migrated.comments] == ["¡Vamos!"]
    assert len(fake_client.tables["event_interactions"]) == 3


def test_preserves_newest_first_order(local_store, remote_store):
    local_store.save_events(
        [local_event("1", "Primero", 1), local_event("2", "Segundo", 2), local_event("3", "Tercero", 3)]
    )

    report = migrate_local_to_remote(remote_store, local_store)

    assert [e.title for e in report.events] == ["Tercero", "Segundo", "Primero"]


def test_empty_local_store_seeds_fixtures(local_store, remote_store):
    local_store.save_events([])

    report = migrate_local_to_remote(remote_store, local_store)

    assert report.source == "fixtures"
    assert report.migrated == 4
    assert {e.title for e in report.events} >= {"Festival de Jazz en el Parque"}


def test_one_failing_record_does_not_stop_the_rest(local_store, remote_store, monkeypatch):
    local_store.save_events(
        [local_event("1", "Bien", 1), local_event("2", "Roto", 2), local_event("3", "También bien", 3)]
    )
    original = remote_store.create_event

    def flaky_create(event):
        if event.title == "Roto":
            return OperationResult.failure("remote_storage_error")
        return original(event)

    monkeypatch.setattr(remote_store, "create_event", flaky_create)

    report = migrate_local_to_remote(remote_store, local_store)

    assert (report.attempted, report.migrated, report.failed) == (3, 2, 1)
    assert {e.title for e in report.events} == {"Bien", "También bien"}


def test_load_events_skips_migration_when_remote_has_data(local_store, remote_store):
    migrate_local_to_remote(remote_store, local_store)
    service = MigrationService(RemoteBackend(remote_store), local_store)

    events = service.load_events()

    assert len(events) == 4
    assert service.last_report is None


def test_load_events_serves_local_copy_when_remote_read_fails(local_store, remote_store, fake_client):
    fake_client.offline = True
    service = MigrationService(RemoteBackend(remote_store), local_store)

    events = service.load_events()

    assert len(events) == 4
    assert service.last_report is None
    assert "events" not in fake_client.tables


def test_migration_runs_again_when_remote_is_emptied(local_store, remote_store):
    service = MigrationService(RemoteBackend(remote_store), local_store)
    service.load_events()
    for event in remote_store.list_events():
        remote_store.delete_event(event.id)

    events = service.load_events()

    assert len(events) == 4
    assert service.last_report.migrated == 4


def test_local_backend_never_migrates(local_store):
    service = MigrationService(LocalBackend(local_store), local_store)
    assert len(service.load_events()) == 4
    assert service.last_report is None
