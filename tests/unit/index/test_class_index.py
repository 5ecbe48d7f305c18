from __future__ import annotations

import pytest

from arabica.index import ClassIndex, short_name_of


def test_short_name_is_last_dotted_component() -> None:
    assert short_name_of("a.b.C") == "C"
    assert short_name_of("Top") == "Top"
    assert short_name_of("a.b.Outer$Inner") == "Outer$Inner"


def test_lookup_returns_sorted_names_without_duplicates() -> None:
    index = ClassIndex()
    assert index.add("com.y.Foo") is True
    assert index.add("com.x.Foo") is True
    assert index.add("com.y.Foo") is False
    index.add("org.Bar")

    assert index.lookup("Foo") == ("com.x.Foo", "com.y.Foo")
    assert index.lookup("Bar") == ("org.Bar",)
    assert len(index) == 2
    assert index.class_count() == 3


def test_unknown_short_name_returns_empty_result() -> None:
    index = ClassIndex()
    index.add("org.Bar")

    assert index.lookup("Baz") == ()
    assert index.lookup("org.Bar") == ()
    assert "Baz" not in index


def test_payload_roundtrip_preserves_keys_and_order() -> None:
    index = ClassIndex()
    for name in ("z.Foo", "a.Foo", "m.Foo", "Bare", "x.y.Bare"):
        index.add(name)

    payload = index.to_payload()
    assert list(payload) == ["Bare", "Foo"]
    assert payload["Foo"] == ["a.Foo", "m.Foo", "z.Foo"]
    assert ClassIndex.from_payload(payload) == index


def test_from_payload_rejects_names_filed_under_wrong_key() -> None:
    with pytest.raises(ValueError, match="does not belong"):
        ClassIndex.from_payload({"Foo": ["a.b.Bar"]})


def test_from_payload_sorts_unsorted_input() -> None:
    index = ClassIndex.from_payload({"Foo": ["z.Foo", "a.Foo", "a.Foo"]})

    assert index.lookup("Foo") == ("a.Foo", "z.Foo")
