"""Tests for nested field resolution."""

from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel, Field

from rulecheck.resolver import MISSING, AliasTable, alternate_name, get_field, is_record, resolve


@dataclass
class Street:
    line: str = field(default="", metadata={"json": "line1,omitempty"})


@dataclass
class Home:
    city: str = field(default="", metadata={"json": "city_name"})
    street: Street = field(default_factory=Street, metadata={"json": "-"})
    note: str | None = None


@dataclass
class Person:
    name: str = ""
    home: Home | None = field(default=None, metadata={"json": "addr"})


class Profile(BaseModel):
    nick_name: str = Field(default="", alias="nickName")
    bio: str = Field(default="", json_schema_extra={"json": "about,omitempty"})


class TestIsRecord:
    """Test record detection."""

    def test_records(self):
        assert is_record(Person())
        assert is_record({"a": 1})
        assert is_record(Profile())

    def test_non_records(self):
        assert not is_record(Person)
        assert not is_record("text")
        assert not is_record(None)
        assert not is_record([1, 2])


class TestGetField:
    """Test single-field reads."""

    def test_declared_and_missing_fields(self):
        assert get_field(Person(name="x"), "name") == "x"
        assert get_field(Person(), "nope") is MISSING

    def test_mapping(self):
        assert get_field({"a": None}, "a") is None
        assert get_field({}, "a") is MISSING

    def test_missing_is_falsy(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"


class TestResolve:
    """Test dotted path resolution."""

    def test_nested_value(self):
        person = Person(home=Home(city="Osaka"))
        assert resolve(person, "home.city") == ("Osaka", "home.city")

    def test_renamed_path(self):
        person = Person(home=Home(street=Street(line="1-2-3")))
        assert resolve(person, "home.city", "json") == ("", "addr.city_name")
        assert resolve(person, "home.street.line", "json") == ("1-2-3", "addr.street.line1")

    def test_none_intermediate(self):
        assert resolve(Person(), "home.city") == (MISSING, "")

    def test_none_leaf(self):
        assert resolve(Person(home=Home()), "home.note") == (MISSING, "")
        assert resolve({"nickname": None}, "nickname") == (MISSING, "")
        assert resolve(Person(home=Home(note="n")), "home.note") == ("n", "home.note")

    def test_unknown_field(self):
        assert resolve(Person(), "age") == (MISSING, "")
        assert resolve(Person(), "name.first") == (MISSING, "")

    def test_pydantic_names(self):
        profile = Profile(nickName="neo", bio="hi")
        assert resolve(profile, "nick_name", "alias") == ("neo", "nickName")
        assert resolve(profile, "bio", "json") == ("hi", "about")
        assert resolve(profile, "nick_name", "json") == ("neo", "nick_name")

    def test_mapping_keys_are_never_renamed(self):
        assert resolve({"home": Home()}, "home.city", "json") == ("", "home.city_name")
        assert alternate_name({"a": 1}, "a", "json") == ""


class TestAliasTable:
    """Test explicit alias registration."""

    def test_registered_name_wins(self):
        aliases = AliasTable()
        aliases.register(Home, "json", {"city": "town"})

        assert alternate_name(Home(), "city", "json", aliases) == "town"
        assert alternate_name(Home(), "city", "json") == "city_name"

    def test_registered_ignore_marker(self):
        aliases = AliasTable()
        aliases.register(Home, "json", {"city": "-"})
        assert alternate_name(Home(), "city", "json", aliases) == ""

    def test_merge_and_copy(self):
        aliases = AliasTable()
        aliases.register(Home, "json", {"city": "town"})
        aliases.register(Home, "json", {"note": "memo"})
        snapshot = aliases.copy()
        aliases.register(Home, "json", {"city": "village"})

        assert len(snapshot) == 2
        assert snapshot.lookup(Home, "city", "json") == "town"
        assert aliases.lookup(Home, "city", "json") == "village"
        assert aliases.lookup(Home, "city", "xml") is None

    def test_empty_scheme(self):
        with pytest.raises(ValueError):
            AliasTable().register(Home, "", {"city": "town"})
