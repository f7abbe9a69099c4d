"""Tests for constraint tag parsing."""

from rulecheck.tags import join_tokens, parse_token, split_tag, tag_after, tag_before


class TestTagParsing:
    """Test token splitting helpers."""

    def test_split_tag(self):
        assert split_tag("required,lte=20") == ["required", "lte=20"]
        assert split_tag("") == [""]

    def test_tag_before(self):
        assert tag_before("lte=20") == "lte"
        assert tag_before("required") == "required"

    def test_tag_after(self):
        assert tag_after("lte=20") == "20"
        assert tag_after("eqfield=a=b") == "a=b"

    def test_tag_after_without_separator(self):
        """A token without '=' is its own parameter."""
        assert tag_after("required") == "required"

    def test_parse_token(self):
        assert parse_token("min=18") == ("min", "18")
        assert parse_token("required") == ("required", "")
        assert parse_token("oneof=") == ("oneof", "")

    def test_join_tokens(self):
        assert join_tokens(["required", "lte=2"]) == "required,lte=2"
        assert join_tokens([]) == ""
