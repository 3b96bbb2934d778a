import pytest

from enterate.models.enums import InteractionType
from enterate.schemas.event import Event
from enterate.services.interaction_service import (
    InteractionLedger,
    LocalInteractionRepository,
    RemoteInteractionRepository,
)

LIKE = InteractionType.LIKE
ATTEND = InteractionType.ATTEND

E1 = {
    "title": "Noche de tango",
    "description": "Milonga abierta",
    "date": "2025-05-02",
    "time": "21:00",
    "location": "Club Social",
    "category": "Música",
    "likes": 0,
    "liked_by": [],
    "attendees": [],
}


@pytest.fixture
def local_env(local_store):
    events = local_store.get_events()
    events.append(Event(id="e1", **E1))
    local_store.save_events(events)
    ledger = InteractionLedger(LocalInteractionRepository(local_store))
    return ledger, local_store.get_event


@pytest.fixture
def remote_env(remote_store, fake_client):
    fake_client.tables["events"] = [{"id": "e1", **E1}]
    ledger = InteractionLedger(RemoteInteractionRepository(remote_store))
    return ledger, remote_store.get_event


@pytest.fixture(params=["local", "remote"])
def env(request):
    return request.getfixturevalue(f"{request.param}_env")


def test_like_then_unlike(env):
    ledger, read_event = env

    liked = ledger.set_interaction("e1", "u1", LIKE, True)
    assert liked.ok
    assert liked.data.likes == 1
    assert read_event("e1").liked_by == ["u1"]
    assert read_event("e1").likes == 1

    unliked = ledger.set_interaction("e1", "u1", LIKE, False)
    assert unliked.ok
    event = read_event("e1")
    assert "u1" not in event.liked_by
    assert event.likes == len(event.liked_by) == 0


def test_attend_twice_records_one_occurrence(env):
    ledger, read_event = env

    ledger.set_interaction("e1", "u1", ATTEND, True)
    ledger.set_interaction("e1", "u1", ATTEND, True)

    assert read_event("e1").attendees.count("u1") == 1


def test_removing_absent_membership_is_a_no_op(env):
    ledger, read_event = env

    result = ledger.set_interaction("e1", "u9", LIKE, False)

    assert result.ok
    assert read_event("e1").liked_by == []


def test_unknown_event(env):
    ledger, _ = env
    result = ledger.set_interaction("missing", "u1", LIKE, True)
    assert not result.ok
    assert result.reason == "event_not_found"


SEQUENCE = [
    ("u1", LIKE, True),
    ("u2", LIKE, True),
    ("u1", ATTEND, True),
    ("u2", LIKE, True),
    ("u3", ATTEND, True),
    ("u1", LIKE, False),
    ("u3", ATTEND, True),
    ("u2", ATTEND, False),
]


def test_local_and_remote_paths_agree(local_env, remote_env):
    results = []
    for ledger, read_event in (local_env, remote_env):
        for user_id, kind, present in SEQUENCE:
            assert ledger.set_interaction("e1", user_id, kind, present).ok
        event = read_event("e1")
        results.append((event.likes, sorted(event.liked_by), sorted(event.attendees)))

    assert results[0] == results[1] == (1, ["u2"], ["u1", "u3"])


def test_remote_write_failure_is_reported(remote_env, fake_client):
    ledger, read_event = remote_env
    fake_client.failing.add(("event_interactions", "upsert"))

    result = ledger.set_interaction("e1", "u1", LIKE, True)

    assert result.reason == "interaction_write_failed"
    assert read_event("e1").likes == 0


def test_remote_counter_write_failure_is_reported(remote_env, fake_client):
    ledger, _ = remote_env
    fake_client.failing.add(("events", "update"))

    result = ledger.set_interaction("e1", "u1", ATTEND, True)

    assert result.reason == "counter_write_failed"


def test_recompute_repairs_drifted_counters(local_store):
    events = local_store.get_events()
    events.append(Event(id="e1", **{**E1, "likes": 7, "liked_by": ["u1", "u1"]}))
    local_store.save_events(events)

    result = InteractionLedger(LocalInteractionRepository(local_store)).recompute("e1")

    assert result.data.likes == 1
    assert local_store.get_event("e1").liked_by == ["u1"]
