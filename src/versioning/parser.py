"""Version string parsing: NuGet normalization and interval notation."""

import re
from typing import Optional

import semantic_version

from registry.errors import GalleryArgumentError
from .models import VersionInterval, VersionMode, VersionRequest

_VERSION_RE = re.compile(
    r'^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.(\d+))?'
    r'(?:-([0-9A-Za-z.\-]+))?(?:\+([0-9A-Za-z.\-]+))?$'
)
_FLOATING_RE = re.compile(r'^(\d+)(?:\.(\d+))?\.\*$')
_RANGE_MARKERS = ('[', ']', '(', ')', ',', '*')


def normalize_version(version: str) -> str:
    """Return the normalized form used by the gallery's NormalizedVersion field.

    Missing components are padded with zero, a fourth component is kept only
    when non-zero, build metadata is dropped and the prerelease label kept.

    Raises:
        GalleryArgumentError: ``version`` is not a valid version string.
    """
    text = (version or "").strip()
    match = _VERSION_RE.match(text)
    if not match:
        raise GalleryArgumentError(f"'{version}' is not a valid version", "InvalidVersion")

    major, minor, patch, revision, prerelease, _build = match.groups()
    try:
        parsed = semantic_version.Version(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            prerelease=tuple(prerelease.split('.')) if prerelease else (),
            build=(),
        )
    except ValueError as exc:
        raise GalleryArgumentError(f"'{version}' is not a valid version: {exc}", "InvalidVersion") from exc

    revision_value = int(revision or 0)
    if revision_value:
        # semantic_version has no fourth component; splice it in after the patch
        core = f"{parsed.major}.{parsed.minor}.{parsed.patch}.{revision_value}"
        return f"{core}-{prerelease}" if prerelease else core
    return str(parsed)


def _floating_interval(major: str, minor: Optional[str]) -> VersionInterval:
    """``3.*`` -> [3.0.0, 4.0.0), ``3.1.*`` -> [3.1.0, 3.2.0)."""
    if minor is None:
        return VersionInterval(
            min_version=f"{int(major)}.0.0",
            max_version=f"{int(major) + 1}.0.0",
            is_min_inclusive=True,
            is_max_inclusive=False,
        )
    return VersionInterval(
        min_version=f"{int(major)}.{int(minor)}.0",
        max_version=f"{int(major)}.{int(minor) + 1}.0",
        is_min_inclusive=True,
        is_max_inclusive=False,
    )


def parse_version_range(spec: str) -> VersionInterval:
    """Parse NuGet interval notation into a VersionInterval.

    Accepted forms: ``*`` (all versions), ``[1.0, 2.0)``, ``(,2.0]``,
    ``[1.0,]``, ``[1.0]`` (exactly 1.0), a bare ``1.0`` (minimum, inclusive)
    and trailing wildcards such as ``3.*``. Bounds come back normalized.

    Raises:
        GalleryArgumentError: the notation cannot be parsed.
    """
    text = (spec or "").strip()
    if text in ("", "*"):
        return VersionInterval()

    floating = _FLOATING_RE.match(text)
    if floating:
        return _floating_interval(floating.group(1), floating.group(2))

    if text[0] not in "[(":
        return VersionInterval(min_version=normalize_version(text), is_min_inclusive=True)

    if len(text) < 2 or text[-1] not in "])":
        raise GalleryArgumentError(f"'{spec}' is not a valid version range", "InvalidVersionRange")

    min_inclusive = text[0] == "["
    max_inclusive = text[-1] == "]"
    inner = text[1:-1]

    if "," not in inner:
        if not (min_inclusive and max_inclusive) or not inner.strip():
            raise GalleryArgumentError(f"'{spec}' is not a valid version range", "InvalidVersionRange")
        exact = normalize_version(inner)
        return VersionInterval(exact, exact, True, True)

    parts = inner.split(",")
    if len(parts) != 2:
        raise GalleryArgumentError(f"'{spec}' is not a valid version range", "InvalidVersionRange")

    low, high = parts[0].strip(), parts[1].strip()
    return VersionInterval(
        min_version=normalize_version(low) if low else None,
        max_version=normalize_version(high) if high else None,
        is_min_inclusive=min_inclusive,
        is_max_inclusive=max_inclusive,
    )


def parse_version_request(raw: Optional[str]) -> VersionRequest:
    """Classify a version argument as latest, exact or range."""
    if raw is None or raw.strip() == "" or raw.strip().lower() == "latest":
        return VersionRequest(raw=raw, mode=VersionMode.LATEST)

    text = raw.strip()
    if any(marker in text for marker in _RANGE_MARKERS):
        return VersionRequest(raw=raw, mode=VersionMode.RANGE, interval=parse_version_range(text))
    return VersionRequest(raw=raw, mode=VersionMode.EXACT, exact=normalize_version(text))
