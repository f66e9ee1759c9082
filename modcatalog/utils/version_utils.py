"""
Version comparison utilities for modcatalog.

This module orders module versions and tests host-runtime versions against
the compatibility ranges declared by releases. Versions follow semantic
versioning and are parsed with :mod:`semver`; precedence is the semver
precedence, with build metadata as a final tiebreak so that successive
release builds (``0.95.5+1``, ``0.95.5+2``) still order.

Catalog ranges use npm-style syntax (``^``, ``~``, x-ranges, hyphen ranges,
``||``). Each alternative is translated into a list of ``(operator,
version)`` comparators that are tested with the same precedence.

None of the helpers here raise. Strings that cannot be parsed fall back to
plain string comparison (:func:`is_newer`, :func:`versions_equal`) or to a
negative answer (:func:`satisfies_range`).
"""

from __future__ import annotations

import re
import semver
from itertools import zip_longest
from typing import List, Optional, Tuple

#: One range comparator, e.g. ``(">=", Version(0, 95, 1))``.
Comparator = Tuple[str, semver.Version]

# ``0.95.5-release.1`` is a release build, not a pre-release
_RELEASE_BUILD = re.compile(r"^(\d+\.\d+\.\d+)-release\.(\d+)$")

_HYPHEN_RANGE = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")
_COMPARATOR = re.compile(r"^(<=|>=|<|>|==|=|\^|~>?)?\s*v?(.*)$")
_WILDCARDS = ("*", "x", "X")
_ZERO = semver.Version(0, 0, 0)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def normalize_version(value: str) -> str:
    """Rewrite release-build tags into their semantic-version equivalent.

    Example:
        >>> normalize_version("0.95.5-release.1")
        '0.95.5+1'
        >>> normalize_version("1.1.0-beta.1")
        '1.1.0-beta.1'
    """
    value = value.strip()
    match = _RELEASE_BUILD.match(value)
    if match:
        return f"{match.group(1)}+{match.group(2)}"
    return value


def parse_version(value: Optional[str]) -> Optional[semver.Version]:
    """Parse a semantic version, returning ``None`` when it is not one.

    A single leading ``v`` or ``=`` is accepted. Partial versions such as
    ``1.0`` and PEP 440 spellings such as ``1.0.0b1`` are not versions.
    """
    if not value:
        return None
    text = normalize_version(value)
    if text[:1] in ("v", "="):
        text = text[1:]
    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError):
        return None


def compare_versions(left: semver.Version, right: semver.Version) -> int:
    """Compare two versions, returning -1, 0 or 1.

    Ties in semver precedence are broken by build metadata, where a
    version without build metadata sorts first.
    """
    result = left.compare(right)
    if result:
        return result
    return _compare_identifiers(left.build, right.build)


def _compare_identifiers(left: Optional[str], right: Optional[str]) -> int:
    """Compare dot-separated identifiers the way semver compares pre-releases."""
    if left == right:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1

    for ours, theirs in zip_longest(left.split("."), right.split(".")):
        if ours == theirs:
            continue
        if ours is None:
            return -1
        if theirs is None:
            return 1
        if ours.isdigit() and theirs.isdigit():
            return -1 if int(ours) < int(theirs) else 1
        if ours.isdigit() != theirs.isdigit():
            # numeric identifiers have lower precedence
            return -1 if ours.isdigit() else 1
        return -1 if ours < theirs else 1
    return 0


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def is_newer(base: str, candidate: str) -> bool:
    """Return whether *candidate* is strictly newer than *base*.

    When either string is not a semantic version the comparison degrades
    to ``base != candidate``. For opaque tags such as build hashes this can
    report a downgrade as newer.

    Examples:
        >>> is_newer("1.0.0", "1.0.1")
        True
        >>> is_newer("1.0.0", "1.0.0-beta.1")
        False
        >>> is_newer("abc123", "def456")
        True
    """
    base_parsed = parse_version(base)
    candidate_parsed = parse_version(candidate)

    if base_parsed is None or candidate_parsed is None:
        return base != candidate

    return compare_versions(base_parsed, candidate_parsed) < 0


def versions_equal(left: Optional[str], right: Optional[str]) -> bool:
    """Return whether two versions denote the same release.

    ``"1.1.0-beta.1"`` and ``"v1.1.0-beta.1"`` are equal; build metadata
    must match too. Unparseable strings are only equal to an identical
    string.
    """
    if left is None or right is None:
        return False

    left_parsed = parse_version(left)
    right_parsed = parse_version(right)

    if left_parsed is None or right_parsed is None:
        return left == right

    return compare_versions(left_parsed, right_parsed) == 0


def is_pre_release(version: str) -> bool:
    """Return whether *version* carries a pre-release tag.

    Release builds (``0.95.5-release.1``) are not pre-releases.
    """
    parsed = parse_version(version)
    return parsed is not None and parsed.prerelease is not None


# ---------------------------------------------------------------------------
# Range satisfaction
# ---------------------------------------------------------------------------


def satisfies_range(version: str, version_range: Optional[str]) -> bool:
    """Return whether *version* lies in the npm-style *version_range*.

    An empty or missing range matches every version. A pre-release
    *version* only matches an alternative containing a comparator that
    names a pre-release of the same ``major.minor.patch``. Build metadata
    is ignored.

    Release builds are normalized first, so a runtime of
    ``0.95.5-release.1`` is tested as ``0.95.5+1`` and satisfies
    ``>=0.95.1`` rather than being treated as a pre-release of 0.95.5.

    Examples:
        >>> satisfies_range("0.95.5", ">=0.95.1")
        True
        >>> satisfies_range("0.94.0", ">=0.95.1")
        False
        >>> satisfies_range("1.4.0", "^1.2.0 || ^2.0.0")
        True
        >>> satisfies_range("0.95.5", None)
        True
    """
    if version_range is None or not version_range.strip():
        return True

    parsed = parse_version(version)
    if parsed is None:
        return False

    alternatives = parse_range(version_range)
    if alternatives is None:
        return False

    return any(_test_comparators(parsed, comparators) for comparators in alternatives)


def _test_comparators(version: semver.Version, comparators: List[Comparator]) -> bool:
    for operator, bound in comparators:
        order = version.compare(bound)
        if operator == ">=" and order < 0:
            return False
        if operator == ">" and order <= 0:
            return False
        if operator == "<=" and order > 0:
            return False
        if operator == "<" and order >= 0:
            return False
        if operator == "==" and order != 0:
            return False

    if version.prerelease is None:
        return True

    return any(
        bound.prerelease is not None
        and (bound.major, bound.minor, bound.patch)
        == (version.major, version.minor, version.patch)
        for _, bound in comparators
    )


def parse_range(version_range: str) -> Optional[List[List[Comparator]]]:
    """Translate an npm-style range into comparator alternatives.

    Each ``||``-separated alternative becomes one comparator list; a
    version satisfies the range when it passes every comparator of any
    alternative.

    Returns:
        The alternatives, or ``None`` when the range cannot be parsed.

    Example:
        >>> [[f"{op}{v}" for op, v in alt] for alt in parse_range("^0.95.0 || 1.x")]
        [['>=0.95.0', '<0.96.0'], ['>=1.0.0', '<2.0.0']]
    """
    alternatives: List[List[Comparator]] = []

    for alternative in version_range.split("||"):
        comparators = _alternative_to_comparators(alternative)
        if comparators is None:
            return None
        alternatives.append(comparators)

    return alternatives


def _alternative_to_comparators(alternative: str) -> Optional[List[Comparator]]:
    """Translate one ``||`` alternative into comparators."""
    alternative = alternative.strip()
    if not alternative:
        # "" and "*" both match everything
        return []

    hyphen = _HYPHEN_RANGE.match(alternative)
    if hyphen:
        lower = _partial(hyphen.group(1))
        upper = _partial(hyphen.group(2))
        if lower is None or upper is None:
            return None
        comparators: List[Comparator] = []
        if lower[0]:
            bound = _version(lower[0], lower[1])
            if bound is None:
                return None
            comparators.append((">=", bound))
        if upper[0]:
            if len(upper[0]) < 3:
                comparators.append(("<", _bump(upper[0])))
            else:
                bound = _version(upper[0], upper[1])
                if bound is None:
                    return None
                comparators.append(("<=", bound))
        return comparators

    comparators = []
    for token in _tokens(alternative):
        translated = _comparator_to_bounds(token)
        if translated is None:
            return None
        comparators.extend(translated)
    return comparators


def _tokens(alternative: str) -> List[str]:
    """Split comparators, joining operators separated from their version."""
    tokens: List[str] = []
    pending = ""
    for part in alternative.split():
        if part in ("<", "<=", ">", ">=", "=", "==", "^", "~", "~>"):
            pending += part
            continue
        tokens.append(pending + part)
        pending = ""
    if pending:
        tokens.append(pending)
    return tokens


def _comparator_to_bounds(token: str) -> Optional[List[Comparator]]:
    """Translate a single npm comparator into bounds."""
    match = _COMPARATOR.match(token)
    if not match:
        return None

    operator = match.group(1) or "="
    partial = _partial(match.group(2))
    if partial is None:
        return None

    numbers, pre = partial

    if not numbers:
        # Wildcard: any version for =, ^, ~, >=, <=; nothing for < and >
        if operator in ("<", ">"):
            return [("<", _ZERO), (">", _ZERO)]
        return []

    if len(numbers) < 3:
        # x-range such as 1.2 or 1.x
        lower = _version(numbers)
        if operator in ("=", "==", "^", "~", "~>"):
            if operator == "^":
                return [(">=", lower), ("<", _caret_upper(numbers))]
            return [(">=", lower), ("<", _bump(numbers))]
        if operator == ">":
            return [(">=", _bump(numbers))]
        if operator == "<=":
            return [("<", _bump(numbers))]
        return [(operator, lower)]

    version = _version(numbers, pre)
    if version is None:
        return None

    if operator == "^":
        return [(">=", version), ("<", _caret_upper(numbers))]
    if operator in ("~", "~>"):
        return [(">=", version), ("<", _bump(numbers[:2]))]
    if operator in ("=", "=="):
        return [("==", version)]
    return [(operator, version)]


def _partial(text: str) -> Optional[Tuple[List[int], str]]:
    """Split ``1.2.x-beta.1`` into numeric parts and a pre-release suffix.

    Wildcard components truncate the numeric list. Returns ``None`` for
    text that is not a (partial) version.
    """
    text = text.strip().lstrip("vV=")
    if text in ("",) + _WILDCARDS:
        return [], ""

    core, _, pre = text.partition("-")
    core = core.split("+", 1)[0]
    pre = pre.split("+", 1)[0]

    numbers: List[int] = []
    for part in core.split("."):
        if part in _WILDCARDS:
            break
        if not part.isdigit():
            return None
        numbers.append(int(part))

    if len(numbers) > 3:
        return None
    if pre and len(numbers) < 3:
        return None
    return numbers, pre


def _version(numbers: List[int], pre: str = "") -> Optional[semver.Version]:
    """Build a version from a padded prefix, or ``None`` for a bad pre-release."""
    padded = list(numbers) + [0] * (3 - len(numbers))
    text = ".".join(str(n) for n in padded)
    try:
        return semver.Version.parse(f"{text}-{pre}" if pre else text)
    except ValueError:
        return None


def _bump(numbers: List[int]) -> semver.Version:
    """Return the first version past the given prefix (``1.2`` -> ``1.3.0``)."""
    bumped = list(numbers)
    bumped[-1] += 1
    bumped += [0] * (3 - len(bumped))
    return semver.Version(*bumped)


def _caret_upper(numbers: List[int]) -> semver.Version:
    """Upper bound of a caret range: bump the first non-zero component."""
    for index, value in enumerate(numbers):
        if value != 0:
            return _bump(numbers[: index + 1])
    return _bump(list(numbers))


# ---------------------------------------------------------------------------
# Update classification (presentation helper)
# ---------------------------------------------------------------------------


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Determine the semantic update type between two versions.

    Args:
        current_version: Currently installed version, or ``None`` if not installed.
        target_version: Target version to compare against.

    Returns:
        One of ``"new"``, ``"same"``, ``"downgrade"``, ``"major"``,
        ``"minor"``, ``"patch"``, ``"update"`` (pre-release or build-only
        change) or ``"unknown"`` (missing or unparseable versions).

    Examples:
        >>> get_update_type("1.0.0", "2.0.0")
        'major'
        >>> get_update_type(None, "1.0.0")
        'new'
        >>> get_update_type("0.95.5-release.0", "0.95.5-release.1")
        'update'
    """
    if current_version is None and target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    if target_version is None:
        return "unknown"

    current = parse_version(current_version)
    target = parse_version(target_version)
    if current is None or target is None:
        return "unknown"

    order = compare_versions(target, current)
    if order == 0:
        return "same"

    if order < 0:
        return "downgrade"

    return _classify_upgrade(current, target)


def _classify_upgrade(current: semver.Version, target: semver.Version) -> str:
    """Classify an upgrade between two valid versions."""
    if current.major != target.major:
        return "major"

    if current.minor != target.minor:
        return "minor"

    if current.patch != target.patch:
        return "patch"

    return "update"
