"""Section labels for split pieces.

A whole section is labelled by its 1-based position ("3"). When a section is
divided across days its pieces are labelled "3 (Part 1)", "3 (Part 2)", ...
Exporters group pieces back together with base_label().
"""

import re
from dataclasses import dataclass

_PART_SUFFIX = re.compile(r"^(?P<base>.*?)\s*\(Part\s*(?P<num>\d+)\)$")
_STRIP_PART_SUFFIX = re.compile(r"\s*\(Part \d+\)$")


@dataclass(frozen=True)
class SplitLabels:
    current: str
    next: str


def split_labels(label: str) -> SplitLabels:
    """Labels for the piece committed now and the piece left for later.

    An existing "(Part N)" suffix continues its sequence; any other label
    starts a new one at Part 1.

    Examples:
        >>> split_labels("4")
        SplitLabels(current='4 (Part 1)', next='4 (Part 2)')
        >>> split_labels("4 (Part 2)")
        SplitLabels(current='4 (Part 2)', next='4 (Part 3)')
    """
    match = _PART_SUFFIX.match(label)
    if match:
        base = match.group("base")
        num = int(match.group("num"))
        return SplitLabels(current=f"{base} (Part {num})", next=f"{base} (Part {num + 1})")

    return SplitLabels(current=f"{label} (Part 1)", next=f"{label} (Part 2)")


def base_label(label: str) -> str:
    """Strip a trailing " (Part N)" suffix."""
    return _STRIP_PART_SUFFIX.sub("", str(label))
