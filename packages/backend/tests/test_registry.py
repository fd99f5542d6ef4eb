"""ClientRegistry tests — ids, removal, snapshot iteration, failed sends."""

import pytest

from estetica.realtime.registry import ClientRegistry

from conftest import BrokenCloseSink, RecordingSink


def test_register_returns_distinct_ids():
    registry = ClientRegistry()
    ids = [registry.register(RecordingSink(), "public") for _ in range(50)]
    assert len(set(ids)) == 50
    assert registry.size() == 50
    assert len(registry) == 50


def test_register_rejects_unknown_audience():
    registry = ClientRegistry()
    with pytest.raises(ValueError):
        registry.register(RecordingSink(), "admin")


def test_remove_is_idempotent():
    registry = ClientRegistry()
    keep = registry.register(RecordingSink(), "public")
    gone = registry.register(RecordingSink(), "auth")

    assert registry.remove(gone) is True
    assert registry.remove(gone) is False
    assert registry.remove("never-registered") is False
    assert keep in registry
    assert gone not in registry
    assert registry.size() == 1


def test_size_tracks_open_subscribers():
    registry = ClientRegistry()
    ids = [registry.register(RecordingSink(), "public") for _ in range(5)]
    for subscriber_id in ids[:3]:
        registry.remove(subscriber_id)
    assert registry.size() == 2


def test_for_each_tolerates_removal_during_iteration():
    registry = ClientRegistry()
    ids = [registry.register(RecordingSink(), "public") for _ in range(4)]
    visited = []

    def visitor(subscriber):
        visited.append(subscriber.id)
        # Removing the rest mid-iteration must not break the loop
        for other in ids:
            if other != subscriber.id:
                registry.remove(other)

    registry.for_each(visitor)
    assert len(visited) == 1
    assert registry.size() == 1


def test_for_each_does_not_visit_entries_added_during_iteration():
    registry = ClientRegistry()
    registry.register(RecordingSink(), "public")
    visited = []

    def visitor(subscriber):
        visited.append(subscriber.id)
        registry.register(RecordingSink(), "auth")

    registry.for_each(visitor)
    assert len(visited) == 1
    assert registry.size() == 2


def test_send_writes_frame():
    registry = ClientRegistry()
    sink = RecordingSink()
    subscriber = registry.get(registry.register(sink, "auth"))
    registry.send(subscriber, "event: ping\ndata: {}\n\n")
    assert sink.frames == ["event: ping\ndata: {}\n\n"]


def test_failed_send_removes_and_closes_subscriber():
    registry = ClientRegistry()
    sink = RecordingSink()
    subscriber_id = registry.register(sink, "public")
    subscriber = registry.get(subscriber_id)
    sink.fail_writes = True

    registry.send(subscriber, "frame")

    assert subscriber_id not in registry
    assert sink.close_calls == 1
    assert sink.frames == []


def test_failed_close_is_discarded():
    registry = ClientRegistry()
    sink = BrokenCloseSink()
    subscriber_id = registry.register(sink, "public")
    sink.fail_writes = True

    registry.send(registry.get(subscriber_id), "frame")

    assert subscriber_id not in registry
    assert sink.close_calls == 1
