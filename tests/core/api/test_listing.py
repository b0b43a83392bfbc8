import json

import pytest
from pydantic import ValidationError

from reddit_relay.contracts.models import ModelRecord
from reddit_relay.core.api.listing import parse_listing, sort_oldest_first


def test_children_sorted_by_base36_id(make_listing, make_child):
    body = json.dumps(make_listing(make_child("t1", "b"), make_child("t1", "a"), make_child("t1", "c")))

    records = parse_listing(body)

    assert [r.id for r in records] == ["a", "b", "c"]
    assert [r.numeric_id for r in records] == [10, 11, 12]


def test_sort_is_numeric_not_lexicographic(make_child):
    records = [
        ModelRecord.model_validate(make_child("t3", "zz")),
        ModelRecord.model_validate(make_child("t3", "100")),
        ModelRecord.model_validate(make_child("t3", "9")),
    ]

    assert [r.id for r in sort_oldest_first(records)] == ["9", "zz", "100"]


def test_extra_payload_fields_are_kept(make_listing, make_child):
    body = json.dumps(make_listing(make_child("t1", "k2", body="hello", score=3)))

    (record,) = parse_listing(body)

    assert record.kind == "t1"
    assert record.fullname == "t1_k2"
    assert record.data.model_extra == {"body": "hello", "score": 3}
    assert record.model_dump()["data"]["body"] == "hello"


def test_empty_children_is_a_valid_listing(make_listing):
    assert parse_listing(json.dumps(make_listing())) == []


@pytest.mark.parametrize(
    "body",
    [
        None,
        "",
        "not json",
        json.dumps({"data": {}}),
        json.dumps({"kind": "Listing"}),
    ],
)
def test_unusable_bodies_yield_none(body):
    assert parse_listing(body) is None


def test_non_base36_id_is_rejected():
    with pytest.raises(ValidationError, match="base-36"):
        ModelRecord.model_validate({"kind": "t1", "data": {"id": "not-an-id"}})


def test_malformed_children_are_skipped(make_listing, make_child):
    body = json.dumps(
        make_listing(
            make_child("t1", "c"),
            {"kind": "t1", "data": {"author": "x"}},
            make_child("t1", "not-an-id"),
            {"data": {"id": "zz"}},
            "garbage",
            make_child("t3", "a"),
        )
    )

    records = parse_listing(body)

    assert [r.fullname for r in records] == ["t3_a", "t1_c"]


def test_listing_of_only_malformed_children_is_empty(make_listing):
    body = json.dumps(make_listing({"kind": "t1", "data": {"author": "x"}}))

    assert parse_listing(body) == []
