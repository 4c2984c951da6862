import pytest

from formfiller.model.position import Position, PositionMap
from formfiller.state.positions import PositionStore


def test_add_assigns_unique_ids():
    store = PositionStore()
    first = store.add(field_id="f1", page=0, x=10, y=20)
    second = store.add(field_id="f1", page=0, x=10, y=20)
    assert first.id != second.id
    assert store.positions == [first, second]


def test_update_merges_patch():
    store = PositionStore()
    position = store.add(field_id="f1", page=0, x=10, y=20, page_width=300, page_height=600)
    updated = store.update(position.id, x=55.5, y=60)
    assert updated is position
    assert (position.x, position.y, position.page_width) == (55.5, 60, 300)


def test_update_unknown_id_is_a_noop():
    store = PositionStore()
    store.add(field_id="f1", page=0, x=10, y=20)
    assert store.update("missing", x=1) is None


def test_update_rejects_identity_changes():
    store = PositionStore()
    position = store.add(field_id="f1", page=0, x=10, y=20)
    with pytest.raises(ValueError):
        store.update(position.id, field_id="f2")


def test_by_page_keeps_insertion_order():
    store = PositionStore()
    a = store.add(field_id="f1", page=1, x=1, y=1)
    store.add(field_id="f2", page=0, x=2, y=2)
    c = store.add(field_id="f3", page=1, x=3, y=3)
    assert store.by_page(1) == [a, c]
    assert store.by_page(5) == []


def test_count_for_field_tracks_adds_and_removes():
    store = PositionStore()
    a = store.add(field_id="f1", page=0, x=1, y=1)
    store.add(field_id="f1", page=1, x=1, y=1)
    store.add(field_id="f2", page=0, x=1, y=1)
    assert store.count_for_field("f1") == 2
    store.remove(a.id)
    assert store.count_for_field("f1") == 1
    assert store.count_for_field("f2") == 1
    assert store.count_for_field("nope") == 0


def test_remove_for_field():
    store = PositionStore()
    store.add(field_id="f1", page=0, x=1, y=1)
    keep = store.add(field_id="f2", page=0, x=1, y=1)
    store.add(field_id="f1", page=2, x=1, y=1)
    assert store.remove_for_field("f1") == 2
    assert store.positions == [keep]


def test_to_map_is_detached_from_store():
    store = PositionStore()
    position = store.add(field_id="f1", page=0, x=1, y=1)
    snapshot = store.to_map()
    store.update(position.id, x=99)
    assert snapshot.for_field("f1")[0].x == 1


def test_position_map_lookups():
    positions = [
        Position(id="a", field_id="f1", page=0, x=1, y=1),
        Position(id="b", field_id="f1", page=1, x=2, y=2),
        Position(id="c", field_id="f2", page=1, x=3, y=3),
    ]
    mapping = PositionMap(positions)
    assert [p.id for p in mapping.for_field("f1")] == ["a", "b"]
    assert [p.id for p in mapping.on_page(1)] == ["b", "c"]
    assert mapping.field_ids() == {"f1", "f2"}
    assert len(mapping) == 3
    assert mapping.for_field("missing") == []
