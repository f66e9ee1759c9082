"""Unit tests for modcatalog.utils.version_utils module.

This test suite covers version parsing, ordering, npm-style range
satisfaction and semantic update classification.

Test Coverage:
- Release-build normalization
- Semantic-version precedence for pre-release identifiers
- Ordering with release builds and opaque tags
- Equality and build metadata
- Range operators (>=, <, ^, ~, x-ranges, hyphen ranges, ||)
- Pre-release runtimes against ranges
- Update type classification
"""

from __future__ import annotations

import pytest
import semver

from modcatalog.utils.version_utils import (
    compare_versions,
    get_update_type,
    is_newer,
    is_pre_release,
    normalize_version,
    parse_range,
    parse_version,
    satisfies_range,
    versions_equal,
    _classify_upgrade,
    _compare_identifiers,
)


@pytest.mark.unit
class TestNormalizeVersion:
    """Tests for normalize_version."""

    def test_release_build_becomes_local_version(self) -> None:
        """Test ``-release.N`` is rewritten as a build number."""
        assert normalize_version("0.95.5-release.1") == "0.95.5+1"

    def test_pre_release_is_untouched(self) -> None:
        """Test real pre-release tags are left alone."""
        assert normalize_version("1.1.0-beta.1") == "1.1.0-beta.1"

    def test_whitespace_is_stripped(self) -> None:
        """Test surrounding whitespace is removed."""
        assert normalize_version("  1.0.0 ") == "1.0.0"


@pytest.mark.unit
class TestParseVersion:
    """Tests for parse_version."""

    def test_semantic_version(self) -> None:
        """Test a plain semantic version parses."""
        assert parse_version("0.95.5") == semver.Version(0, 95, 5)

    def test_semver_pre_release(self) -> None:
        """Test pre-release identifiers are kept verbatim."""
        parsed = parse_version("1.1.0-beta.1")

        assert parsed is not None
        assert parsed.prerelease == "beta.1"

    def test_release_build_becomes_build_metadata(self) -> None:
        """Test ``-release.N`` parses as build metadata, not a pre-release."""
        parsed = parse_version("0.95.5-release.1")

        assert parsed is not None
        assert parsed.prerelease is None
        assert parsed.build == "1"

    def test_leading_v_is_accepted(self) -> None:
        """Test a single leading ``v`` is allowed."""
        assert parse_version("v1.2.3") == semver.Version(1, 2, 3)

    @pytest.mark.parametrize("value", ["1.0", "1.0.0b1", "1.0.0.1", "01.0.0"])
    def test_non_semver_spellings_return_none(self, value: str) -> None:
        """Test partial and PEP 440 spellings are not semantic versions."""
        assert parse_version(value) is None

    def test_opaque_tag_returns_none(self) -> None:
        """Test build hashes are not versions."""
        assert parse_version("abc1234") is None

    def test_empty_and_none(self) -> None:
        """Test empty input returns None."""
        assert parse_version("") is None
        assert parse_version(None) is None


@pytest.mark.unit
class TestIsNewer:
    """Tests for is_newer ordering."""

    @pytest.mark.parametrize(
        "base,candidate,expected",
        [
            ("1.0.0", "1.0.1", True),
            ("1.0.1", "1.0.0", False),
            ("1.0.0", "1.0.0", False),
            ("1.0.0-beta.1", "1.0.0", True),
            ("1.0.0", "1.0.0-beta.1", False),
            ("1.1.0-beta.1", "1.1.0-beta.2", True),
            ("0.95.5-release.0", "0.95.5-release.1", True),
            ("0.95.5", "0.95.5-release.1", True),
            ("0.9.0", "0.10.0", True),
        ],
    )
    def test_semantic_ordering(self, base: str, candidate: str, expected: bool) -> None:
        """Test ordering of parseable versions."""
        assert is_newer(base, candidate) is expected

    @pytest.mark.parametrize(
        "base,candidate",
        [
            ("1.0.0-1", "1.0.0"),
            ("1.0.0-post.1", "1.0.0"),
            ("1.0.0-alpha.1", "1.0.0-dev.1"),
            ("1.0.0-pre.1", "1.0.0-rc.1"),
            ("1.0.0-alpha", "1.0.0-alpha.1"),
            ("1.0.0-alpha.1", "1.0.0-alpha.beta"),
            ("1.0.0-beta.2", "1.0.0-beta.11"),
            ("1.0.0-rc.1", "1.0.0"),
        ],
    )
    def test_pre_release_precedence(self, base: str, candidate: str) -> None:
        """Test pre-release identifiers order by semantic-version precedence.

        Edge case: ``-1`` and ``-post.1`` are pre-releases, so they sort
        below the bare version rather than after it.
        """
        assert is_newer(base, candidate) is True
        assert is_newer(candidate, base) is False

    def test_opaque_tags_fall_back_to_inequality(self) -> None:
        """Test differing opaque tags always count as newer.

        Edge case: Hashes have no order, so a downgrade looks newer too.
        """
        assert is_newer("abc1234", "def5678") is True
        assert is_newer("def5678", "abc1234") is True

    def test_identical_opaque_tags_are_not_newer(self) -> None:
        """Test identical opaque tags are not newer."""
        assert is_newer("abc1234", "abc1234") is False

    def test_mixed_opaque_and_semantic(self) -> None:
        """Test one unparseable side also falls back to inequality."""
        assert is_newer("1.0.0", "nightly") is True


@pytest.mark.unit
class TestVersionsEqual:
    """Tests for versions_equal."""

    def test_equivalent_spellings(self) -> None:
        """Test a leading ``v`` does not change the version."""
        assert versions_equal("1.1.0-beta.1", "v1.1.0-beta.1") is True

    def test_distinct_pre_release_tags(self) -> None:
        """Test different pre-release identifiers are different versions."""
        assert versions_equal("1.0.0-pre.1", "1.0.0-rc.1") is False
        assert versions_equal("1.0.0-1", "1.0.0") is False

    def test_pep440_spelling_is_not_semver(self) -> None:
        """Test ``1.1.0b1`` is compared literally, not as ``1.1.0-beta.1``."""
        assert versions_equal("1.1.0-beta.1", "1.1.0b1") is False

    def test_build_metadata_must_match(self) -> None:
        """Test release builds differ from the bare version."""
        assert versions_equal("0.95.5-release.1", "0.95.5+1") is True
        assert versions_equal("0.95.5-release.1", "0.95.5") is False

    def test_different_versions(self) -> None:
        """Test distinct versions are not equal."""
        assert versions_equal("1.0.0", "1.0.1") is False

    def test_opaque_tags_compare_as_strings(self) -> None:
        """Test unparseable strings are only equal to themselves."""
        assert versions_equal("abc", "abc") is True
        assert versions_equal("abc", "abd") is False

    def test_none_is_never_equal(self) -> None:
        """Test a missing version is never equal to anything."""
        assert versions_equal(None, "1.0.0") is False
        assert versions_equal("1.0.0", None) is False
        assert versions_equal(None, None) is False


@pytest.mark.unit
class TestIsPreRelease:
    """Tests for is_pre_release."""

    def test_pre_release_tags(self) -> None:
        """Test alpha, beta and rc tags are pre-releases."""
        assert is_pre_release("1.0.0-alpha.1") is True
        assert is_pre_release("1.0.0-beta.2") is True
        assert is_pre_release("1.0.0-rc.1") is True
        assert is_pre_release("1.0.0-1") is True

    def test_stable_and_release_builds(self) -> None:
        """Test stable versions and release builds are not pre-releases."""
        assert is_pre_release("1.0.0") is False
        assert is_pre_release("0.95.5-release.1") is False

    def test_opaque_tag(self) -> None:
        """Test unparseable tags are not pre-releases."""
        assert is_pre_release("abc1234") is False


@pytest.mark.unit
class TestSatisfiesRange:
    """Tests for satisfies_range."""

    @pytest.mark.parametrize(
        "version,version_range,expected",
        [
            ("0.95.5", ">=0.95.1", True),
            ("0.95.0", ">=0.95.1", False),
            ("0.95.5", "<0.96", True),
            ("0.96.0", "<0.96", False),
            ("0.95.5", ">=0.95.1 <0.96.0", True),
            ("0.96.1", ">=0.95.1 <0.96.0", False),
            ("0.95.5", ">= 0.95.1", True),
            ("1.4.0", "^1.2.0", True),
            ("2.0.0", "^1.2.0", False),
            ("0.95.9", "^0.95.0", True),
            ("0.96.0", "^0.95.0", False),
            ("1.2.9", "~1.2.3", True),
            ("1.3.0", "~1.2.3", False),
            ("1.9.0", "1.x", True),
            ("2.0.0", "1.x", False),
            ("1.2.7", "1.2", True),
            ("1.3.0", "1.2", False),
            ("1.3.0", ">1.2", True),
            ("1.2.5", ">1.2", False),
            ("1.2.5", "<=1.2", True),
            ("1.5.0", "1.0.0 - 2.0.0", True),
            ("2.0.0", "1.0.0 - 2.0.0", True),
            ("2.0.1", "1.0.0 - 2.0.0", False),
            ("2.9.0", "1.0 - 2", True),
            ("3.0.0", "1.0 - 2", False),
            ("1.0.0", "=1.0.0", True),
            ("1.0.1", "=1.0.0", False),
            ("0.5.0", "*", True),
        ],
    )
    def test_range_operators(
        self, version: str, version_range: str, expected: bool
    ) -> None:
        """Test npm-style comparators and shorthands."""
        assert satisfies_range(version, version_range) is expected

    def test_alternatives(self) -> None:
        """Test ``||`` accepts a version matching any alternative."""
        assert satisfies_range("1.4.0", "^1.2.0 || ^2.0.0") is True
        assert satisfies_range("2.3.0", "^1.2.0 || ^2.0.0") is True
        assert satisfies_range("3.0.0", "^1.2.0 || ^2.0.0") is False

    def test_missing_range_matches_everything(self) -> None:
        """Test None and blank ranges accept any version."""
        assert satisfies_range("0.95.5", None) is True
        assert satisfies_range("0.95.5", "") is True
        assert satisfies_range("0.95.5", "   ") is True

    def test_unparseable_range_is_not_satisfied(self) -> None:
        """Test garbage ranges never match."""
        assert satisfies_range("0.95.5", "not a range") is False

    def test_unparseable_version_is_not_satisfied(self) -> None:
        """Test an opaque runtime version never matches a range."""
        assert satisfies_range("nightly", ">=0.95.1") is False

    def test_release_build_runtime(self) -> None:
        """Test a release-build runtime matches on its public version."""
        assert satisfies_range("0.95.5-release.1", ">=0.95.1") is True

    def test_pre_release_runtime_needs_pre_release_range(self) -> None:
        """Test pre-release runtimes only match ranges naming a pre-release."""
        assert satisfies_range("0.96.0-beta.1", ">=0.95.1") is False
        assert satisfies_range("0.96.0-beta.1", ">=0.96.0-beta.0") is True

    def test_pre_release_range_is_tied_to_its_patch(self) -> None:
        """Test a pre-release comparator only admits pre-releases of its own patch."""
        assert satisfies_range("0.96.1-beta.1", ">=0.96.0-beta.0") is False

    def test_numeric_pre_release_is_below_its_release(self) -> None:
        """Test ``1.0.0-1`` is a pre-release of 1.0.0, not a later build."""
        assert satisfies_range("1.0.0-1", ">=1.0.0") is False
        assert satisfies_range("1.0.0-1", "<1.0.0") is False
        assert satisfies_range("1.0.0-1", ">=1.0.0-0 <1.0.0") is True

    def test_build_metadata_is_ignored(self) -> None:
        """Test build metadata does not affect range checks."""
        assert satisfies_range("0.95.5+7", "<=0.95.5") is True


@pytest.mark.unit
class TestParseRange:
    """Tests for parse_range translation."""

    @staticmethod
    def _render(alternatives) -> list:
        return [[f"{op}{bound}" for op, bound in alt] for alt in alternatives]

    def test_caret_and_x_range(self) -> None:
        """Test each alternative becomes one comparator list."""
        alternatives = parse_range("^0.95.0 || 1.x")

        assert alternatives is not None
        assert self._render(alternatives) == [
            [">=0.95.0", "<0.96.0"],
            [">=1.0.0", "<2.0.0"],
        ]

    def test_caret_on_zero_major_and_minor(self) -> None:
        """Test ``^0.0.3`` only allows patch releases of 0.0.3."""
        alternatives = parse_range("^0.0.3")

        assert alternatives is not None
        assert self._render(alternatives) == [[">=0.0.3", "<0.0.4"]]

    def test_pre_release_bound_is_kept(self) -> None:
        """Test pre-release identifiers survive translation untouched."""
        alternatives = parse_range(">=1.0.0-dev.1")

        assert alternatives is not None
        assert self._render(alternatives) == [[">=1.0.0-dev.1"]]

    def test_invalid_range(self) -> None:
        """Test unparseable ranges return None."""
        assert parse_range(">=abc") is None
        assert parse_range("1.2.3.4") is None
        assert parse_range(">=1.0.0-beta..1") is None


@pytest.mark.unit
class TestCompareVersions:
    """Tests for compare_versions and _compare_identifiers."""

    def test_build_metadata_breaks_ties(self) -> None:
        """Test release builds order after the bare version and by number."""
        bare = semver.Version.parse("0.95.5")
        first = semver.Version.parse("0.95.5+1")
        second = semver.Version.parse("0.95.5+2")

        assert compare_versions(bare, first) == -1
        assert compare_versions(first, second) == -1
        assert compare_versions(second, second) == 0

    def test_precedence_before_build(self) -> None:
        """Test build metadata never outweighs version precedence."""
        assert (
            compare_versions(
                semver.Version.parse("1.0.0+99"), semver.Version.parse("1.0.1")
            )
            == -1
        )

    @pytest.mark.parametrize(
        "left,right,expected",
        [
            (None, None, 0),
            (None, "1", -1),
            ("1", None, 1),
            ("2", "10", -1),
            ("10", "alpha", -1),
            ("alpha", "beta", -1),
            ("a.b", "a", 1),
        ],
    )
    def test_identifier_order(self, left, right, expected: int) -> None:
        """Test dot-separated identifier ordering."""
        assert _compare_identifiers(left, right) == expected


@pytest.mark.unit
class TestGetUpdateType:
    """Tests for get_update_type classification."""

    @pytest.mark.parametrize(
        "current,target,expected",
        [
            (None, "1.0.0", "new"),
            (None, None, "unknown"),
            ("1.0.0", None, "unknown"),
            ("1.0.0", "1.0.0", "same"),
            ("2.0.0", "1.0.0", "downgrade"),
            ("1.0.0", "2.0.0", "major"),
            ("1.0.0", "1.1.0", "minor"),
            ("1.0.0", "1.0.1", "patch"),
            ("1.1.0-beta.1", "1.1.0", "update"),
            ("0.95.5-release.0", "0.95.5-release.1", "update"),
            ("abc1234", "1.0.0", "unknown"),
        ],
    )
    def test_classification(self, current, target, expected: str) -> None:
        """Test update types for representative version pairs."""
        assert get_update_type(current, target) == expected

    def test_classify_upgrade_uses_first_differing_part(self) -> None:
        """Test the most significant changed component wins."""
        current = semver.Version.parse("1.2.3")

        assert _classify_upgrade(current, semver.Version.parse("1.2.4")) == "patch"
        assert _classify_upgrade(current, semver.Version.parse("1.3.0")) == "minor"
        assert _classify_upgrade(current, semver.Version.parse("2.0.0")) == "major"

    def test_pre_release_below_release_is_downgrade(self) -> None:
        """Test moving from 1.0.0 to 1.0.0-1 is a downgrade."""
        assert get_update_type("1.0.0", "1.0.0-1") == "downgrade"
