import pytest

from avrograph.names import Name


def test_dotted_name_splits_on_last_dot():
    name = Name.from_fully_qualified_name("a.b.c")
    assert name.name == "c"
    assert name.namespace == "a.b"
    assert name.fully_qualified_name == "a.b.c"


def test_name_without_namespace():
    name = Name("plain")
    assert name.name == "plain"
    assert name.namespace is None
    assert name.fully_qualified_name == "plain"


def test_leading_dot_is_stripped():
    name = Name.from_fully_qualified_name(".x")
    assert name.namespace is None
    assert name.name == "x"
    assert name.fully_qualified_name == "x"
    assert name == Name("x")


def test_from_parts_matches_fully_qualified():
    assert Name.from_parts("a.b", "c") == Name("a.b.c")
    assert hash(Name.from_parts("a.b", "c")) == hash(Name("a.b.c"))


def test_from_parts_without_namespace():
    name = Name.from_parts(None, "rec")
    assert name == Name("rec")
    assert name.namespace is None


@pytest.mark.parametrize("text", ["a.b.c", "ns.Rec", "Rec", "x.y"])
def test_round_trip_through_parts(text):
    name = Name(text)
    rebuilt = Name.from_parts(name.namespace, name.name)
    assert rebuilt == name
    assert rebuilt.fully_qualified_name == text


def test_repr_is_fully_qualified_name():
    assert repr(Name("a.b.c")) == repr("a.b.c")


def test_names_usable_as_dict_keys():
    table = {Name("a.b"): 1}
    assert table[Name.from_parts("a", "b")] == 1


def test_different_names_are_unequal():
    assert (Name("a.b") == Name("a.c")) is False
    assert (Name("a") == "a") is False