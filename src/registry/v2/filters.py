"""OData ``$filter`` fragments for V2 gallery queries.

Values are wrapped in single quotes as-is. Embedded quotes are not escaped,
so a name or tag containing ``'`` produces a filter the server rejects.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from versioning.models import VersionInterval
from versioning.parser import normalize_version
from ..errors import GalleryArgumentError

_GLOB_ERROR_ID = "FindNameGlobbingFailure"


class FilterExpression:
    """AND-joined list of filter fragments.

    Fragments are only ever joined between each other, so the rendered
    expression never starts or ends with ``and`` and an expression with no
    fragments renders as the empty string.
    """

    def __init__(self, *fragments: Optional[str]):
        self._fragments: List[str] = []
        self.extend(fragments)

    def add(self, fragment: Optional[str]) -> "FilterExpression":
        """Append a fragment; None and empty strings are ignored."""
        if fragment:
            self._fragments.append(fragment)
        return self

    def extend(self, fragments: Iterable[Optional[str]]) -> "FilterExpression":
        for fragment in fragments:
            self.add(fragment)
        return self

    def is_empty(self) -> bool:
        return not self._fragments

    def render(self) -> str:
        return " and ".join(self._fragments)

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        return len(self._fragments)


def id_filter(package_name: str) -> str:
    """Identity filter; required whenever $filter is used for a named package."""
    return f"Id eq '{package_name}'"


def latest_version_filter(include_prerelease: bool) -> str:
    return "IsAbsoluteLatestVersion" if include_prerelease else "IsLatestVersion"


def tag_filters(tags: Optional[Iterable[str]]) -> List[str]:
    """One ``substringof`` fragment per tag, in the order given."""
    return [f"substringof('{tag}', Tags) eq true" for tag in (tags or [])]


def exact_version_filter(version: str) -> str:
    return f"NormalizedVersion eq '{version}'"


def version_range_filter(interval: VersionInterval) -> FilterExpression:
    """Translate a version interval into NormalizedVersion comparisons.

    Minimum bound uses ``ge``/``gt``, maximum ``le``/``lt``. Bounds are
    rendered in normalized form (``1.0`` becomes ``1.0.0``). An interval with
    no bounds yields an empty expression.

    Raises:
        GalleryArgumentError: a bound is not a valid version.
    """
    expression = FilterExpression()
    if interval.min_version is not None:
        operation = "ge" if interval.is_min_inclusive else "gt"
        expression.add(f"NormalizedVersion {operation} '{normalize_version(interval.min_version)}'")
    if interval.max_version is not None:
        operation = "le" if interval.is_max_inclusive else "lt"
        expression.add(f"NormalizedVersion {operation} '{normalize_version(interval.max_version)}'")
    return expression


def name_glob_filter(pattern: str) -> str:
    """Map a wildcard name to a filter fragment.

    Supported shapes: ``*Shell*`` (contains), ``PowerShell*`` (starts with),
    ``*ShellGet`` (ends with) and ``Power*Get`` (starts and ends with).

    Raises:
        GalleryArgumentError: for ``*`` alone, names without a wildcard and
            every other wildcard shape.
    """
    names = [segment for segment in pattern.split("*") if segment]

    if not names:
        raise GalleryArgumentError(
            "-Name '*' for V2 server protocol repositories is not supported",
            _GLOB_ERROR_ID,
        )

    if "*" in pattern:
        leading = pattern.startswith("*")
        trailing = pattern.endswith("*")
        if len(names) == 1:
            if leading and trailing:
                return f"substringof('{names[0]}', Id)"
            if trailing:
                return f"startswith(Id, '{names[0]}')"
            if leading:
                return f"endswith(Id, '{names[0]}')"
        elif len(names) == 2 and not leading and not trailing:
            return f"startswith(Id, '{names[0]}') and endswith(Id, '{names[1]}')"

    raise GalleryArgumentError(
        "-Name with wildcards is only supported for scenarios similar to the following "
        "examples: PowerShell*, *ShellGet, *Shell*, Power*Get.",
        _GLOB_ERROR_ID,
    )
