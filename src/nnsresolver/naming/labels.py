"""Name shape checks for `.nex` names."""

from __future__ import annotations

import re

from nnsresolver.core.exceptions import InvalidNameError

# Registrar rules for second-level labels
_LABEL_RE = re.compile(r"[a-z0-9-]+")
MIN_LABEL_LENGTH = 3


def is_valid_label(label: str) -> bool:
    """
    Check a label against the registrar's registration rules.

    At least three characters of [a-z0-9-], not starting or ending with a hyphen.
    """
    if not label or len(label) < MIN_LABEL_LENGTH:
        return False
    if not _LABEL_RE.fullmatch(label):
        return False
    return not (label.startswith("-") or label.endswith("-"))


def has_suffix(name: str, suffix: str) -> bool:
    return name.lower().endswith(f".{suffix}")


def strip_suffix(name: str, suffix: str) -> str:
    """
    Return the part of `name` before `.<suffix>`.

    Raises:
        InvalidNameError: if the suffix is missing or nothing precedes it
    """
    if not has_suffix(name, suffix):
        raise InvalidNameError(f"Name must end with .{suffix}: {name!r}", name=name)
    base = name[: -(len(suffix) + 1)]
    if not base:
        raise InvalidNameError(f"Name is empty after stripping .{suffix}", name=name)
    if any(not part for part in base.split(".")):
        raise InvalidNameError(f"Name has an empty label: {name!r}", name=name)
    return base


def normalize_name(name: str, suffix: str) -> str:
    """Lower-case and shape-check a naming-protocol name."""
    lowered = name.strip().lower()
    strip_suffix(lowered, suffix)
    return lowered
