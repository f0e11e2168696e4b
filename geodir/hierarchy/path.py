"""
Materialized path encoding for division trees.

A path is the ">"-joined, lower-cased chain of names from the country ISO
code down to the node itself:

    np>bagmati>kathmandu>kathmandu-city

The stored `level` column stays authoritative; level_of() is for integrity
checks only.
"""

from dataclasses import dataclass

from geodir.errors import InvalidNameError

DELIMITER = ">"


def normalize_segment(name: str) -> str:
    """Lower-case one path segment. Whitespace is preserved as given."""
    segment = (name or "").lower()
    if not segment.strip():
        raise InvalidNameError("Path segment must not be empty")
    if DELIMITER in segment:
        raise InvalidNameError(
            f"Path segment {name!r} must not contain {DELIMITER!r}"
        )
    return segment


def build_path(ancestor_names: list[str] | tuple[str, ...], self_name: str) -> str:
    """Join ancestor names (country code first) and the node's own name."""
    segments = [normalize_segment(n) for n in ancestor_names]
    segments.append(normalize_segment(self_name))
    return DELIMITER.join(segments)


def level_of(path: str) -> int:
    """Number of segments below the country-code segment."""
    return len(path.split(DELIMITER)) - 1


def is_descendant(path: str, ancestor_path: str) -> bool:
    return path.startswith(ancestor_path + DELIMITER)


@dataclass(frozen=True)
class DivisionPath:
    """
    Validated path value: country code plus the names below it.

    Build children with child(); the parent/child level relation then holds
    by construction.
    """

    segments: tuple[str, ...]

    def __post_init__(self):
        if len(self.segments) < 1:
            raise InvalidNameError("A path needs at least the country code")
        object.__setattr__(
            self, "segments", tuple(normalize_segment(s) for s in self.segments)
        )

    @classmethod
    def root(cls, iso_code: str) -> "DivisionPath":
        return cls((iso_code,))

    @classmethod
    def parse(cls, path: str) -> "DivisionPath":
        return cls(tuple(path.split(DELIMITER)))

    def child(self, name: str) -> "DivisionPath":
        return DivisionPath(self.segments + (name,))

    @property
    def level(self) -> int:
        return len(self.segments) - 1

    @property
    def name(self) -> str:
        return self.segments[-1]

    def contains(self, other: "DivisionPath") -> bool:
        """True if `other` lies strictly below this path."""
        return is_descendant(str(other), str(self))

    def __str__(self) -> str:
        return DELIMITER.join(self.segments)
