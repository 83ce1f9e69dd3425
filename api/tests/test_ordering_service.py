"""Tests for the reorder workflow."""

import json

import pytest

from app.services.ordering_service import (
    InvalidOrderPayload,
    parse_order_payload,
    reorder_artworks,
)


def _make(store, title, order_index):
    return store.insert({"title": title, "order_index": order_index, "is_active": True})


def _order_map(store):
    return {a.title: a.order_index for a in store.list_ordered()}


class TestParseOrderPayload:
    """Tests for parse_order_payload function."""

    def test_json_text(self):
        assert parse_order_payload('["a", "b"]') == ["a", "b"]

    def test_bytes(self):
        assert parse_order_payload(b'["a"]') == ["a"]

    def test_decoded_list(self):
        assert parse_order_payload(["a", "b"]) == ["a", "b"]

    def test_empty_list(self):
        assert parse_order_payload("[]") == []

    @pytest.mark.parametrize(
        "raw",
        [
            '{"order": ["a"]}',
            "not json",
            '"a"',
            "[1, 2]",
            '["a", null]',
            '["a", ""]',
            b"\xff\xfe",
            None,
            "",
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(InvalidOrderPayload):
            parse_order_payload(raw)


class TestReorderArtworks:
    """Tests for reorder_artworks function."""

    def test_assigns_one_based_positions(self, store):
        a = _make(store, "A", 1)
        b = _make(store, "B", 2)
        c = _make(store, "C", 3)

        result = reorder_artworks(store, json.dumps([c.id, a.id, b.id]))

        assert result.accepted
        assert result.updated == 3
        assert _order_map(store) == {"C": 1, "A": 2, "B": 3}
        assert [x.title for x in store.list_ordered()] == ["C", "A", "B"]

    def test_same_order_twice_is_idempotent(self, store):
        ids = [_make(store, t, i).id for i, t in enumerate(["A", "B", "C"], start=5)]

        reorder_artworks(store, json.dumps(ids))
        first = _order_map(store)
        reorder_artworks(store, json.dumps(ids))

        assert _order_map(store) == first == {"A": 1, "B": 2, "C": 3}

    def test_unknown_ids_skipped_and_omitted_keep_key(self, store):
        a = _make(store, "A", 10)
        _make(store, "B", 20)
        c = _make(store, "C", 30)

        result = reorder_artworks(store, json.dumps([c.id, a.id, "X"]))

        assert result.accepted
        assert result.updated == 2
        assert result.skipped == ["X"]
        assert _order_map(store) == {"C": 1, "A": 2, "B": 20}

    def test_malformed_payload_is_noop(self, store):
        _make(store, "A", 4)
        _make(store, "B", 7)
        store.writes.clear()

        result = reorder_artworks(store, '{"order": "nope"}')

        assert not result.accepted
        assert result.updated == 0
        assert store.writes == []
        assert _order_map(store) == {"A": 4, "B": 7}

    def test_failed_row_does_not_stop_others(self, store):
        a = _make(store, "A", 1)
        b = _make(store, "B", 2)
        store.fail_ids.add(a.id)

        result = reorder_artworks(store, json.dumps([b.id, a.id]))

        assert result.accepted
        assert result.updated == 1
        assert result.failed == [a.id]
        assert _order_map(store) == {"B": 1, "A": 1}
