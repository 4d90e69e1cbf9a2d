"""
DataType system for PyVector / PyFactor / PyTable.

Pure metadata design:
  - DataType describes plain column semantics (type + nullable flag)
  - CategoricalType describes factor columns (level set + orderedness)
  - Promotion is functional (immutable instances)
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Type
import warnings

from .levels import LevelSet


@dataclass(frozen=True)
class DataType:
    """
    Describes the semantic type of a PyVector column.

    Attributes
    ----------
    kind : Type
        Python type (int, float, str, date, etc.)
    nullable : bool
        Whether the column may contain None values

    Examples
    --------
    >>> DataType(int)
    <int>
    >>> DataType(float).promote_with(None)
    <float nullable>
    """

    kind: Type[Any]
    nullable: bool = False

    def __repr__(self):
        if self.nullable:
            return f"<{self.kind.__name__} nullable>"
        return f"<{self.kind.__name__}>"

    @property
    def is_numeric(self) -> bool:
        """True if kind is bool, int, float, or complex."""
        try:
            return issubclass(self.kind, (int, float, complex, bool))
        except TypeError:
            return False

    @property
    def is_categorical(self) -> bool:
        return False

    def with_nullable(self, nullable: bool = True) -> "DataType":
        if nullable == self.nullable:
            return self
        return DataType(self.kind, nullable)

    def promote_with(self, value: Any) -> "DataType":
        """
        Promote this DataType to accommodate a new Python value.

        Never mutates; always returns new DataType.
        """
        # None just lifts nullability
        if value is None:
            return self.with_nullable(True)

        vtype = type(value)

        if vtype is self.kind:
            return self

        # Numeric ladder (bool -> int -> float -> complex)
        if self.is_numeric and isinstance(value, (int, float, complex, bool)):
            if self.kind is complex or vtype is complex:
                new_kind = complex
            elif self.kind is float or vtype is float:
                new_kind = float
            elif self.kind is int or vtype is int:
                new_kind = int
            else:
                new_kind = bool
            if new_kind != self.kind:
                return DataType(new_kind, self.nullable)
            return self

        # Temporal ladder (date -> datetime)
        if issubclass(self.kind, date) and isinstance(value, date):
            if self.kind is datetime or vtype is datetime:
                return DataType(datetime, self.nullable)
            return self

        if self.kind is not object:
            warnings.warn(
                f"Degrading column<{self.kind.__name__}> to column<object> "
                f"due to incompatible value of type {vtype.__name__}",
                stacklevel=3,
            )
            return DataType(object, self.nullable)

        return self


@dataclass(frozen=True)
class CategoricalType:
    """
    Describes the semantic type of a PyFactor column.

    Attributes
    ----------
    levels : LevelSet
        The closed vocabulary, in report order
    ordered : bool
        Whether level order is also a magnitude order (enables <, >)
    nullable : bool
        Whether any observation is missing

    Notes
    -----
    Two factors share a type only if their levels match in the same order;
    the same labels in a different order are a different category domain.
    """

    levels: LevelSet
    ordered: bool = False
    nullable: bool = False

    # Observations decode to labels
    kind = str

    def __repr__(self):
        prefix = "ordered factor" if self.ordered else "factor"
        suffix = " nullable" if self.nullable else ""
        return f"<{prefix}[{len(self.levels)}]{suffix}>"

    @property
    def is_numeric(self) -> bool:
        return False

    @property
    def is_categorical(self) -> bool:
        return True


def infer_kind(value: Any) -> Optional[Type]:
    """
    Infer Python type for a single scalar.

    Returns None for None values.
    """
    if value is None:
        return None

    # bool before int, datetime before date (subclasses)
    for kind in (bool, int, float, complex, str, bytes, datetime, date):
        if isinstance(value, kind):
            return kind
    return object


def infer_dtype(values: Iterable[Any]) -> DataType:
    """
    Infer a DataType from an iterable of Python scalars.

    Examples
    --------
    >>> infer_dtype([1, 2, 3])
    <int>
    >>> infer_dtype([1, 2.5, 3])
    <float>
    >>> infer_dtype(["a", None])
    <str nullable>
    """
    dtype: Optional[DataType] = None
    pending_null = False

    for v in values:
        if dtype is None:
            k = infer_kind(v)
            if k is None:
                pending_null = True
                continue
            dtype = DataType(k, nullable=pending_null)
        else:
            dtype = dtype.promote_with(v)

    # All values were None, or empty iterable
    if dtype is None:
        return DataType(object, nullable=True)

    return dtype
