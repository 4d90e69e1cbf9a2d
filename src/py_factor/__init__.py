"""
py-factor: categorical columns for a Pythonic, zero-dependency table library

A factor stores a column of category labels as an ordered level set plus one
integer code per observation. Levels keep their order (the order every report
uses), stay attached when rows are dropped, and only change through explicit
whole-column operations, so recoding or concatenating can never silently move
observations into the wrong category.

Main classes:
    - PyFactor: categorical column (level set + codes)
    - PyVector: plain 1D column with type inference
    - PyTable: named columns of equal length, with an ingestion policy

Helpers:
    - count_1d / count_nd / crosstab: level-ordered, zero-filled tallies
    - CoercionPolicy: which columns become factors on ingestion
    - concat: concatenate factors by label, never by code

Zero external dependencies - pure Python stdlib only.
"""

from .errors import (
    PyFactorError,
    PyFactorKeyError,
    PyFactorValueError,
    PyFactorTypeError,
    PyFactorIndexError,
    LevelMismatchError,
    DuplicateLevelError,
    NonNumericLevelError,
    IndexOutOfRangeError,
)
from .levels import LevelSet, MISSING_CODE
from .typing import DataType, CategoricalType
from .vector import PyVector
from .factor import PyFactor, concat
from .tally import count_1d, count_nd, crosstab
from .coercion import CoercionPolicy, coerce_column, reconcile_column
from .table import PyTable

# Name used for the categorical column in design documents and other libraries
CategoricalColumn = PyFactor

__version__ = "0.1.0"
__all__ = [
    "PyFactor",
    "CategoricalColumn",
    "PyVector",
    "PyTable",
    "LevelSet",
    "MISSING_CODE",
    "DataType",
    "CategoricalType",
    "concat",
    "count_1d",
    "count_nd",
    "crosstab",
    "CoercionPolicy",
    "coerce_column",
    "reconcile_column",
    "PyFactorError",
    "PyFactorKeyError",
    "PyFactorValueError",
    "PyFactorTypeError",
    "PyFactorIndexError",
    "LevelMismatchError",
    "DuplicateLevelError",
    "NonNumericLevelError",
    "IndexOutOfRangeError",
]
