"""
Level sets for PyFactor.

A LevelSet is the closed, ordered vocabulary of a categorical column:
  - labels are unique strings, None is never a level
  - position is identity: code i means labels[i]
  - instances never change; extension, renaming and restriction return
    new LevelSets
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import DuplicateLevelError
from .errors import IndexOutOfRangeError
from .errors import LevelMismatchError
from .errors import PyFactorIndexError
from .errors import PyFactorTypeError
from .errors import PyFactorValueError


# Out-of-band code carried by missing observations
MISSING_CODE = -1

ON_UNKNOWN_CHOICES = ("raise", "missing")

# How many offending labels an error message lists before summarizing
_MAX_REPORTED = 5


def is_missing(value: Any) -> bool:
    """None and float NaN are missing observations."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def to_label(value: Any) -> Optional[str]:
    """Normalize a raw value to a level label (None when missing)."""
    if is_missing(value):
        return None
    if isinstance(value, str):
        return value
    return str(value)


def parse_number(label: str) -> Any:
    """int if the label reads as one, else float, else None"""
    try:
        return int(label)
    except ValueError:
        pass
    try:
        return float(label)
    except ValueError:
        return None


def check_on_unknown(on_unknown: str) -> str:
    if on_unknown not in ON_UNKNOWN_CHOICES:
        raise PyFactorValueError(
            f"on_unknown must be one of {ON_UNKNOWN_CHOICES}, not {on_unknown!r}"
        )
    return on_unknown


def _safe_sorted(values: List[Any]) -> List[Any]:
    """Sort raw values, falling back to their string form for mixed types."""
    try:
        return sorted(values)
    except TypeError:
        return sorted(values, key=str)


def _describe(labels: List[str]) -> str:
    shown = ", ".join(repr(x) for x in labels[:_MAX_REPORTED])
    if len(labels) > _MAX_REPORTED:
        shown += f", ... ({len(labels)} total)"
    return shown


@dataclass(frozen=True)
class LevelSet:
    """
    Ordered, deduplicated labels of a category domain.

    Attributes
    ----------
    labels : tuple of str
        Level labels in report order

    Examples
    --------
    >>> LevelSet(("Large", "Medium", "Small")).index("Medium")
    1
    >>> LevelSet.infer([10, 1, 4, 1])
    LevelSet(labels=('1', '4', '10'))
    """

    labels: Tuple[str, ...] = ()
    _lookup: Dict[str, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        labels = tuple(self.labels)
        lookup = {}
        duplicates = []
        for i, label in enumerate(labels):
            if label is None:
                raise PyFactorValueError(
                    "None cannot be a level; missing observations are stored out of band"
                )
            if not isinstance(label, str):
                raise PyFactorTypeError(
                    f"Level labels must be str, not {type(label).__name__}"
                )
            if label in lookup:
                duplicates.append(label)
            else:
                lookup[label] = i
        if duplicates:
            raise DuplicateLevelError(f"Duplicate levels: {_describe(duplicates)}")
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "_lookup", lookup)

    # ------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------

    @classmethod
    def from_labels(cls, levels: Iterable[Any]) -> "LevelSet":
        """Build from caller-supplied levels, kept in the given order."""
        if isinstance(levels, LevelSet):
            return levels
        if isinstance(levels, (str, bytes)):
            raise PyFactorTypeError("levels must be a sequence of labels, not a single string")
        out = []
        for value in levels:
            label = to_label(value)
            if label is None:
                raise PyFactorValueError(
                    "None cannot be a level; missing observations are stored out of band"
                )
            out.append(label)
        return cls(tuple(out))

    @classmethod
    def infer(cls, values: Iterable[Any]) -> "LevelSet":
        """
        Sorted distinct labels of values, ignoring missing ones.

        Sorting happens on the raw values, so numbers order numerically
        before being turned into labels.
        """
        first_raw = {}
        for value in values:
            label = to_label(value)
            if label is not None and label not in first_raw:
                first_raw[label] = value
        ordered = _safe_sorted(list(first_raw.values()))
        return cls(tuple(dict.fromkeys(to_label(v) for v in ordered)))

    @classmethod
    def first_seen(cls, values: Iterable[Any]) -> "LevelSet":
        """Distinct labels in order of first appearance."""
        return cls(tuple(dict.fromkeys(
            label for label in (to_label(v) for v in values) if label is not None
        )))

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __getitem__(self, i: int) -> str:
        return self.labels[i]

    def __contains__(self, label) -> bool:
        return label in self._lookup

    def index(self, label: str) -> int:
        """Position of label, raising LevelMismatchError if it is not a level."""
        try:
            return self._lookup[label]
        except (KeyError, TypeError):
            raise LevelMismatchError(
                f"{label!r} is not a level (levels: {_describe(list(self.labels))})"
            ) from None

    def position(self, i: int) -> int:
        """Normalize a (possibly negative) level index."""
        if not isinstance(i, int) or isinstance(i, bool):
            raise PyFactorTypeError(f"Level index must be int, not {type(i).__name__}")
        n = len(self.labels)
        if i < 0:
            i += n
        if not (0 <= i < n):
            raise PyFactorIndexError(f"Level index {i} out of range for {n} levels")
        return i

    # ------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------

    def encode(self, values: Iterable[Any], on_unknown: str = "raise") -> Tuple[int, ...]:
        """
        Map raw values to codes.

        Missing values map to MISSING_CODE. Values that are not levels raise
        LevelMismatchError, or map to MISSING_CODE with on_unknown="missing".
        """
        check_on_unknown(on_unknown)
        lookup = self._lookup
        codes = []
        unknown = []
        for value in values:
            label = to_label(value)
            if label is None:
                codes.append(MISSING_CODE)
                continue
            code = lookup.get(label)
            if code is None:
                if label not in unknown:
                    unknown.append(label)
                codes.append(MISSING_CODE)
            else:
                codes.append(code)
        if unknown and on_unknown == "raise":
            raise LevelMismatchError(
                f"Values not in levels: {_describe(unknown)}. "
                "Pass on_unknown='missing' to store them as missing."
            )
        return tuple(codes)

    def decode(self, codes: Iterable[int]) -> Tuple[Optional[str], ...]:
        labels = self.labels
        n = len(labels)
        out = []
        for code in codes:
            if code == MISSING_CODE:
                out.append(None)
            elif 0 <= code < n:
                out.append(labels[code])
            else:
                raise IndexOutOfRangeError(f"Code {code} references no level ({n} levels)")
        return tuple(out)

    # ------------------------------------------------------------
    # Derived level sets
    # ------------------------------------------------------------

    def extend(self, values: Iterable[Any]) -> "LevelSet":
        """Append unseen labels in first-appearance order; existing order is kept."""
        added = [x for x in LevelSet.first_seen(values) if x not in self._lookup]
        if not added:
            return self
        return LevelSet(self.labels + tuple(added))

    def union(self, *others: Iterable[Any]) -> "LevelSet":
        """
        Sorted union of this level set and others.

        Labels that all read as numbers sort by value ("2" before "10"),
        matching the order inferred from numeric input; otherwise labels
        sort as text.
        """
        merged = dict.fromkeys(self.labels)
        for other in others:
            merged.update(dict.fromkeys(
                label for label in (to_label(v) for v in other) if label is not None
            ))
        labels = list(merged)
        numbers = [parse_number(x) for x in labels]
        # NaN has no place in a sort order
        if labels and all(n is not None and n == n for n in numbers):
            return LevelSet(tuple(x for _, x in sorted(zip(numbers, labels))))
        return LevelSet(tuple(sorted(labels)))

    def rename(self, i: int, new_label: Any) -> "LevelSet":
        i = self.position(i)
        label = to_label(new_label)
        if label is None:
            raise PyFactorValueError("A level cannot be renamed to a missing value")
        existing = self._lookup.get(label)
        if existing is not None and existing != i:
            raise DuplicateLevelError(
                f"Cannot rename level {self.labels[i]!r} to {label!r}: level already exists"
            )
        labels = list(self.labels)
        labels[i] = label
        return LevelSet(tuple(labels))

    def take(self, positions: Iterable[int]) -> "LevelSet":
        return LevelSet(tuple(self.labels[i] for i in positions))
