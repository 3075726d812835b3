"""Tests for git package descriptions."""

import pytest

from gitsource.errors import FormatError
from gitsource.model.description import (
    BareDescription,
    GitDescription,
    descriptions_equal,
    parse_description,
    pin,
    validate_description,
)
from gitsource.model.package import PackageId


class TestValidateDescription:
    """Test validation of raw descriptions."""

    @pytest.mark.short
    def test_bare_string_is_valid(self):
        validate_description("https://github.com/user/repo.git")

    @pytest.mark.short
    def test_mapping_with_url_and_ref(self):
        validate_description({"url": "https://github.com/user/repo.git", "ref": "main"})

    @pytest.mark.short
    def test_missing_url(self):
        with pytest.raises(FormatError, match="'url' key"):
            validate_description({"ref": "main"})

    @pytest.mark.short
    def test_not_a_string_or_mapping(self):
        with pytest.raises(FormatError, match="must be a Git URL"):
            validate_description(["https://github.com/user/repo.git"])

    @pytest.mark.short
    def test_extra_key_is_named(self):
        with pytest.raises(FormatError, match=r"Invalid key: foo\."):
            validate_description({"url": "repo.git", "foo": "bar"})

    @pytest.mark.short
    def test_extra_keys_are_listed(self):
        with pytest.raises(FormatError, match=r"Invalid keys: bar, foo\."):
            validate_description({"url": "repo.git", "foo": 1, "bar": 2})

    @pytest.mark.short
    def test_resolved_ref_rejected_outside_lock_file(self):
        with pytest.raises(FormatError, match="resolved-ref"):
            validate_description({"url": "repo.git", "resolved-ref": "abc"})

    @pytest.mark.short
    def test_resolved_ref_accepted_from_lock_file(self):
        validate_description(
            {"url": "repo.git", "ref": "main", "resolved-ref": "abc"},
            from_lock_file=True,
        )

    @pytest.mark.short
    def test_non_string_ref(self):
        with pytest.raises(FormatError, match="'ref'"):
            validate_description({"url": "repo.git", "ref": 1.0})

    @pytest.mark.short
    def test_empty_url(self):
        with pytest.raises(FormatError, match="'url'"):
            validate_description({"url": "  "})


class TestParseDescription:
    """Test building description variants."""

    @pytest.mark.short
    def test_bare_string(self):
        description = parse_description("repo.git")
        assert isinstance(description, BareDescription)
        assert description.url == "repo.git"
        assert description.ref is None
        assert description.resolved_ref is None

    @pytest.mark.short
    def test_mapping(self):
        description = parse_description(
            {"url": "repo.git", "ref": "main", "resolved-ref": "abc"},
            from_lock_file=True,
        )
        assert description == GitDescription(
            url="repo.git", ref="main", resolved_ref="abc"
        )

    @pytest.mark.short
    def test_invalid_mapping_raises_format_error(self):
        with pytest.raises(FormatError):
            parse_description({"url": "repo.git", "foo": "bar"})

    @pytest.mark.short
    def test_parsed_value_is_returned_unchanged(self):
        description = GitDescription(url="repo.git")
        assert parse_description(description) is description

    @pytest.mark.short
    def test_to_raw_omits_missing_keys(self):
        assert parse_description("repo.git").to_raw() == "repo.git"
        assert parse_description({"url": "repo.git"}).to_raw() == {"url": "repo.git"}
        raw = {"url": "repo.git", "ref": "dev", "resolved-ref": "abc"}
        assert parse_description(raw, from_lock_file=True).to_raw() == raw


class TestPin:
    @pytest.mark.short
    def test_pin_bare_description(self):
        pinned = pin(BareDescription(url="repo.git"), "abc")
        assert pinned.to_raw() == {"url": "repo.git", "resolved-ref": "abc"}

    @pytest.mark.short
    def test_pin_keeps_url_and_ref(self):
        description = GitDescription(url="repo.git", ref="main", resolved_ref="old")
        pinned = pin(description, "new")
        assert pinned.to_raw() == {
            "url": "repo.git",
            "ref": "main",
            "resolved-ref": "new",
        }


class TestDescriptionsEqual:
    """Test equality of descriptions as seen by the version solver."""

    @pytest.mark.short
    def test_same_url_and_ref(self):
        assert descriptions_equal(
            {"url": "A", "ref": "main"}, {"url": "A", "ref": "main"}
        )

    @pytest.mark.short
    def test_different_ref(self):
        assert not descriptions_equal(
            {"url": "A", "ref": "main"}, {"url": "A", "ref": "dev"}
        )

    @pytest.mark.short
    def test_resolved_ref_is_ignored(self):
        assert descriptions_equal(
            {"url": "A", "ref": "main", "resolved-ref": "abc"},
            {"url": "A", "ref": "main", "resolved-ref": "def"},
        )

    @pytest.mark.short
    def test_different_url(self):
        assert not descriptions_equal("A", "B")

    @pytest.mark.short
    def test_bare_string_equals_mapping_without_ref(self):
        assert descriptions_equal("A", {"url": "A"})

    @pytest.mark.short
    def test_bare_string_differs_from_mapping_with_ref(self):
        assert not descriptions_equal("A", {"url": "A", "ref": "main"})

    @pytest.mark.short
    def test_trailing_slash_is_normalized(self):
        assert descriptions_equal("https://host/repo/", "https://host/repo")

    @pytest.mark.short
    def test_accepts_package_ids(self):
        id1 = PackageId(name="pkg", description={"url": "A", "ref": "main"})
        id2 = PackageId(
            name="pkg",
            description={"url": "A", "ref": "main", "resolved-ref": "abc"},
        )
        assert descriptions_equal(id1, id2)
