"""
Tallies and cross-tabulations over factors.

Results follow level order (never observation order, never alphabetical
unless that is the level order) and include every level, or level
combination, with zero counts filled in.
"""

from itertools import product

from .errors import PyFactorValueError
from .factor import PyFactor
from .levels import MISSING_CODE
from .naming import _uniquify
from .typing import DataType
from .vector import PyVector


def _as_factor(column):
	if isinstance(column, PyFactor):
		return column
	return PyFactor(column)


def _prepare(columns):
	if isinstance(columns, (PyFactor, PyVector)):
		columns = [columns]
	factors = [_as_factor(c) for c in columns]
	if not factors:
		raise PyFactorValueError("Need at least one column to tally")
	lengths = {len(f) for f in factors}
	if len(lengths) > 1:
		raise PyFactorValueError(f"Columns to tally must have equal length, got {sorted(lengths)}")
	return factors


def _axis(factor, include_missing):
	"""Report keys for one column and the code each key stands for."""
	keys = list(factor.levels)
	codes = list(range(len(keys)))
	if include_missing and factor.has_missing():
		keys.append(None)
		codes.append(MISSING_CODE)
	return keys, codes


def _partition(factors, include_missing):
	"""code tuple -> number of rows carrying it"""
	counter = {}
	for key in zip(*(f._codes for f in factors)):
		if not include_missing and MISSING_CODE in key:
			continue
		counter[key] = counter.get(key, 0) + 1
	return counter


def count_1d(column, include_missing=False):
	"""
	Count observations per level, in level order.

	Levels without observations are reported with 0. Missing observations
	are left out unless include_missing is set, in which case a trailing
	None key holds their count (only if there are any).

	Examples
	--------
	>>> size = PyFactor(["Medium", "Small", "Large", "Medium"], levels=["Large", "Medium", "Small"])
	>>> count_1d(size)
	{'Large': 1, 'Medium': 2, 'Small': 1}
	"""
	factor = _as_factor(column)
	counts = [0] * factor.nlevels()
	missing = 0
	for code in factor._codes:
		if code == MISSING_CODE:
			missing += 1
		else:
			counts[code] += 1
	result = dict(zip(factor.levels, counts))
	if include_missing and missing:
		result[None] = missing
	return result


def _nest(axes, counter, prefix):
	keys, codes = axes[0]
	if len(axes) == 1:
		return {k: counter.get(prefix + (c,), 0) for k, c in zip(keys, codes)}
	return {k: _nest(axes[1:], counter, prefix + (c,)) for k, c in zip(keys, codes)}


def count_nd(columns, include_missing=False):
	"""
	Cross-tabulate equal-length columns.

	Returns nested dicts: the outer keys are the first column's levels,
	the next level of keys the second column's levels, and so on, each in
	its column's level order, zero-filled. Rows with a missing value are
	skipped unless include_missing is set.

	Examples
	--------
	>>> count_nd([PyFactor(["a", "b", "a"]), PyFactor(["x", "x", "y"])])
	{'a': {'x': 1, 'y': 1}, 'b': {'x': 1, 'y': 0}}
	"""
	factors = _prepare(columns)
	counter = _partition(factors, include_missing)
	axes = [_axis(f, include_missing) for f in factors]
	return _nest(axes, counter, ())


def crosstab(*columns, names=None, include_missing=False):
	"""
	Long-form cross-tabulation as a PyTable.

	One row per level combination (zero rows included), ordered by the
	first column's levels, then the second's, and so on. Key columns are
	factors over the input level sets; the last column is `count`.
	"""
	from .table import PyTable

	factors = _prepare(columns)
	if names is None:
		names = [f.name or f"factor{i}" for i, f in enumerate(factors)]
	elif len(names) != len(factors):
		raise PyFactorValueError(f"Got {len(names)} names for {len(factors)} columns")

	seen = set()
	unique_names = []
	for name in list(names) + ["count"]:
		name = _uniquify(name, seen)
		seen.add(name)
		unique_names.append(name)

	counter = _partition(factors, include_missing)
	axes = [_axis(f, include_missing) for f in factors]

	key_codes = [[] for _ in factors]
	counts = []
	for combo in product(*(codes for _, codes in axes)):
		for i, code in enumerate(combo):
			key_codes[i].append(code)
		counts.append(counter.get(combo, 0))

	result_cols = [
		PyFactor._from_parts(f.level_set, key_codes[i], f.ordered, unique_names[i])
		for i, f in enumerate(factors)
	]
	result_cols.append(PyVector(counts, dtype=DataType(int), name=unique_names[-1]))
	return PyTable(result_cols)
