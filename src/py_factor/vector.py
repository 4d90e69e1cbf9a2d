import operator
import warnings

from .errors import PyFactorIndexError
from .errors import PyFactorTypeError
from .errors import PyFactorValueError
from .display import _printr
from .typing import DataType
from .typing import infer_dtype

from typing import Any
from typing import Iterable
from typing import List


def _is_sequence(x: Any) -> bool:
	return hasattr(x, '__iter__') and not isinstance(x, (str, bytes, bytearray))


def _bool_mask(key, n: int):
	"""Return key as a list of bools if it is a boolean mask, else None."""
	if isinstance(key, PyVector):
		schema = key.schema()
		if schema is None or schema.kind is not bool:
			return None
		flags = list(key)
	elif isinstance(key, list) and key and all(isinstance(e, bool) for e in key):
		flags = key
	else:
		return None
	if len(flags) != n:
		raise PyFactorValueError(f"Boolean mask length {len(flags)} does not match length {n}.")
	if any(f is None for f in flags):
		raise PyFactorValueError("Boolean masks cannot contain None.")
	return flags


def _int_positions(key, n: int):
	"""Return key as a list of in-range ints if it is an index list, else None."""
	if isinstance(key, PyVector):
		schema = key.schema()
		if schema is None or schema.kind is not int:
			return None
		key = list(key)
	if not isinstance(key, (list, tuple)) or not all(isinstance(e, int) and not isinstance(e, bool) for e in key):
		return None
	out = []
	for idx in key:
		if idx < 0:
			idx += n
		if not (0 <= idx < n):
			raise PyFactorIndexError(f"Index {idx} out of range for length {n}.")
		out.append(idx)
	return out


def select_positions(key, n: int) -> List[int]:
	"""
	Resolve a row selector (slice, boolean mask, or integer index list)
	to a list of positions. Shared by PyVector, PyFactor and PyTable.
	"""
	if isinstance(key, slice):
		return list(range(*key.indices(n)))
	flags = _bool_mask(key, n)
	if flags is not None:
		return [i for i, flag in enumerate(flags) if flag]
	positions = _int_positions(key, n)
	if positions is not None:
		if n > 1000:
			warnings.warn('Subscript indexing is sub-optimal for large vectors; prefer slices or boolean masks', stacklevel=3)
		return positions
	raise PyFactorTypeError(f'Indices must be slices, boolean masks, integer lists or integers, not {type(key).__name__}')


# ============================================================
# Main backend
# ============================================================

class PyVector():
	""" Immutable 1D column with an inferred DataType """
	_dtype = None  # DataType instance (private)
	_underlying = None
	_name = None

	def __init__(self, initial=(), dtype=None, name=None):
		"""
		Initialize a new PyVector instance.

		Generators are materialized once; factors contribute their labels.
		"""
		if isinstance(initial, PyVector):
			initial = initial._underlying
		self._underlying = tuple(initial)

		# Convert Python types to DataType if needed
		if dtype is not None and not isinstance(dtype, DataType):
			dtype = DataType(dtype)
		if dtype is None and self._underlying:
			dtype = infer_dtype(self._underlying)
		self._dtype = dtype
		self._name = name

	def schema(self):
		"""Get the DataType schema of this vector."""
		return self._dtype

	@property
	def name(self):
		return self._name

	def size(self):
		if not self._underlying:
			return tuple()
		return (len(self),)

	def copy(self, new_values=None, name=...):
		# Sentinel (...) distinguishes name=None (clear) from not passing name (preserve)
		use_name = self._name if name is ... else name
		if new_values is None:
			return PyVector(self._underlying, dtype=self._dtype, name=use_name)
		return PyVector(new_values, name=use_name)

	def rename(self, new_name):
		"""Return a copy of this vector under a new name"""
		return self.copy(name=new_name)

	def as_factor(self, levels=None, ordered=False, on_unknown="raise"):
		"""
		Convert to a PyFactor. Without levels, the sorted distinct values
		become the levels.
		"""
		from .factor import PyFactor
		return PyFactor(self._underlying, levels=levels, ordered=ordered,
			name=self._name, on_unknown=on_unknown)

	def __repr__(self):
		return _printr(self)

	def __iter__(self):
		""" iterate over the underlying tuple """
		return iter(self._underlying)

	def __len__(self):
		""" length of the underlying tuple """
		return len(self._underlying)

	def __getitem__(self, key):
		""" Get item(s) from self. Behavior varies by input type:
		The following return a PyVector:
			# PyVector or list of bool: Logical indexing (masking)
			# Slice: the elements of the slice
			# PyVector or list of int: the elements at those positions (NOT RECOMMENDED for large vectors)

		Special: Indexing a single index returns a value
		"""
		if isinstance(key, int) and not isinstance(key, bool):
			return self._underlying[key]
		return self._take(select_positions(key, len(self)))

	def _take(self, positions):
		data = self._underlying
		return PyVector(tuple(data[i] for i in positions), dtype=self._dtype, name=self._name)

	def __setitem__(self, key, value):
		raise PyFactorTypeError("PyVector is immutable; build a new vector instead.")

	def isna(self):
		"""
		Return boolean mask of None values.

		Examples
		--------
		>>> v = PyVector([1, None, 3])
		>>> list(v.isna())
		[False, True, False]
		"""
		return PyVector(tuple(elem is None for elem in self._underlying), dtype=DataType(bool))

	def dropna(self):
		"""Remove None values from the vector."""
		return PyVector(tuple(elem for elem in self._underlying if elem is not None), name=self._name)

	def unique(self):
		"""Distinct values in order of first appearance."""
		seen = set()
		out = []
		for x in self._underlying:
			if x not in seen:
				seen.add(x)
				out.append(x)
		return PyVector(out, name=self._name)

	def all(self):
		"""Return True if all elements are truthy (excluding None)."""
		return all(v for v in self._underlying if v is not None)

	def any(self):
		"""Return True if any element is truthy (excluding None)."""
		return any(v for v in self._underlying if v is not None)

	""" Comparison Operators
		# __eq__ ==
		# __ne__ !=
		# __ge__ >=
		# __gt__ >
		# __lt__ <
		# __le__ <=
	"""
	def _elementwise_compare(self, other, op):
		if _is_sequence(other):
			other = tuple(other)
			if len(other) != len(self):
				raise PyFactorValueError(f"Cannot compare vectors of length {len(self)} and {len(other)}.")
			result_values = tuple(False if (x is None or y is None) else bool(op(x, y)) for x, y in zip(self, other))
		else:
			result_values = tuple(False if x is None else bool(op(x, other)) for x in self)
		return PyVector(result_values, dtype=DataType(bool))

	def __eq__(self, other):
		return self._elementwise_compare(other, operator.eq)

	def __ne__(self, other):
		return self._elementwise_compare(other, operator.ne)

	def __ge__(self, other):
		return self._elementwise_compare(other, operator.ge)

	def __gt__(self, other):
		return self._elementwise_compare(other, operator.gt)

	def __le__(self, other):
		return self._elementwise_compare(other, operator.le)

	def __lt__(self, other):
		return self._elementwise_compare(other, operator.lt)

	__hash__ = None

	def __invert__(self):
		if self._dtype is None or self._dtype.kind is not bool:
			raise PyFactorTypeError("~ is only supported on boolean vectors")
		return PyVector(tuple(None if x is None else not x for x in self), dtype=self._dtype)

	def __and__(self, other):
		return self._elementwise_compare(other, operator.and_)

	def __or__(self, other):
		return self._elementwise_compare(other, operator.or_)

	def __bool__(self):
		"""
		Standard Python truthiness: returns True if the vector is not empty.

		Note: Emits a warning because users often mistakenly use 'if vec'
		when they mean 'if vec.any()'.
		"""
		is_non_empty = bool(self._underlying)
		if is_non_empty and self._dtype is not None and self._dtype.kind is bool:
			warnings.warn(
				"PyVector is being used in a boolean context (e.g., 'if vector:'). "
				"This checks for emptiness (len > 0), not element-wise truth. "
				"Use .any() or .all() for element-wise checks.",
				stacklevel=2
			)
		return is_non_empty

	def __lshift__(self, other):
		""" The << operator behavior has been overridden to concatenate (append) other to the end of self
		"""
		if _is_sequence(other):
			return PyVector(self._underlying + tuple(other), name=self._name)
		return PyVector(self._underlying + (other,), name=self._name)
