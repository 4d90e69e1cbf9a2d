"""
Ingestion policy for PyTable.

Decides which raw columns become factors when a table is built, and how
appended rows are folded into existing columns. The policy is an explicit
object handed to each table; there is no process-wide switch.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

from .errors import PyFactorTypeError
from .factor import PyFactor
from .levels import check_on_unknown
from .typing import infer_dtype
from .vector import PyVector
from .vector import _is_sequence


@dataclass(frozen=True)
class CoercionPolicy:
    """
    Which columns are categorical on ingestion.

    Attributes
    ----------
    auto_categorize : bool
        Text columns (inferred kind str) become factors with sorted levels.
        Numeric and other columns are never converted automatically.
    categorical : frozenset of str
        Column names converted to factors regardless of their type.
    levels : dict
        Column name -> explicit level order. Implies categorical.
    on_unknown : {"raise", "missing"}
        Handling of values outside an explicit level order.

    Examples
    --------
    >>> CoercionPolicy(auto_categorize=True).wants_factor("size", ["S", "M"])
    True
    >>> CoercionPolicy().wants_factor("size", ["S", "M"])
    False
    """

    auto_categorize: bool = False
    categorical: FrozenSet[str] = frozenset()
    levels: Dict[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)
    on_unknown: str = "raise"

    def __post_init__(self):
        categorical = self.categorical
        if isinstance(categorical, str):
            categorical = (categorical,)
        object.__setattr__(self, "categorical", frozenset(categorical))
        object.__setattr__(self, "levels", {k: tuple(v) for k, v in dict(self.levels).items()})
        check_on_unknown(self.on_unknown)

    def wants_factor(self, name: Any, values: Any) -> bool:
        if isinstance(values, PyFactor):
            return True
        if name in self.categorical or name in self.levels:
            return True
        if not self.auto_categorize:
            return False
        dtype = values.schema() if isinstance(values, PyVector) else infer_dtype(values)
        return dtype is not None and dtype.kind is str


DEFAULT_POLICY = CoercionPolicy()


def coerce_column(name, values, policy: CoercionPolicy = None):
    """Turn raw values into the PyVector or PyFactor the policy asks for."""
    policy = policy or DEFAULT_POLICY
    if isinstance(values, PyFactor):
        if name in policy.levels:
            values = values.set_levels(policy.levels[name], on_unknown=policy.on_unknown)
        return values.rename(name)
    if not _is_sequence(values):
        raise PyFactorTypeError(
            f"Column {name!r} must be a sequence of values, not {type(values).__name__}"
        )
    values = tuple(values)
    if policy.wants_factor(name, values):
        return PyFactor(values, levels=policy.levels.get(name), name=name,
                        on_unknown=policy.on_unknown)
    return PyVector(values, name=name)


def reconcile_column(existing, new_values, policy: CoercionPolicy = None):
    """
    Append new_values to an existing column.

    Factors are extended: labels already known keep their codes, unseen
    labels are appended to the level order. An incoming factor is read as
    labels, so its codes are never reused against another level set.

    An empty plain column carries no type to keep, so the policy decides
    again from the incoming values.
    """
    if isinstance(existing, PyFactor):
        return existing.append(new_values)
    if len(existing) == 0:
        return coerce_column(existing.name, new_values, policy)
    return existing << new_values
