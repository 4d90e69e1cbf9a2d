"""
PyFactor: a categorical column with a fixed level set and integer-coded storage.

Levels and codes only change together, through whole-column rebuilds:
  - rename_level / rename_levels change what a code displays as
  - set_levels / recode / concatenate decode to labels and re-encode
No operation edits the level array while keeping the old codes.
"""

import operator
import warnings

from .display import _printr
from .errors import IndexOutOfRangeError
from .errors import NonNumericLevelError
from .errors import PyFactorTypeError
from .errors import PyFactorValueError
from .levels import LevelSet
from .levels import MISSING_CODE
from .levels import check_on_unknown
from .levels import parse_number
from .levels import to_label
from .typing import CategoricalType
from .typing import DataType
from .vector import PyVector
from .vector import _bool_mask
from .vector import _is_sequence
from .vector import select_positions


class PyFactor():
	""" Categorical column: an ordered level set plus one code per observation """
	_levels = None  # LevelSet
	_codes = None   # tuple of int, MISSING_CODE for missing
	_ordered = False
	_name = None

	def __init__(self, labels=(), levels=None, ordered=None, name=None, on_unknown="raise"):
		"""
		Create a factor from raw labels.

		Parameters
		----------
		labels : iterable
			Observations. None and NaN are missing; other non-str values
			are converted with str().
		levels : iterable of str, optional
			Level order, used verbatim. If omitted, the sorted distinct
			values of labels.
		ordered : bool, optional
			Whether level order is a magnitude order (enables <, >).
			Defaults to False, or to the orderedness of a PyFactor input.
		on_unknown : {"raise", "missing"}
			What to do with labels outside an explicit level set.

		Raises
		------
		LevelMismatchError
			A label is not in levels and on_unknown is "raise".
		DuplicateLevelError
			levels contains the same label twice.
		"""
		check_on_unknown(on_unknown)
		if isinstance(labels, (PyFactor, PyVector)) and name is None:
			name = labels._name
		if isinstance(labels, PyFactor):
			if levels is None:
				# Rewrapping a factor keeps its level set, unused levels included
				levels = labels._levels
			if ordered is None:
				ordered = labels._ordered
		if _is_sequence(labels):
			values = tuple(labels)
		else:
			raise PyFactorTypeError(f"labels must be an iterable of values, not {type(labels).__name__}")

		if levels is None:
			level_set = LevelSet.infer(values)
		else:
			level_set = LevelSet.from_labels(levels)
		codes = level_set.encode(values, on_unknown=on_unknown)
		self._init_parts(level_set, codes, ordered, name)

	def _init_parts(self, level_set, codes, ordered, name):
		self._levels = level_set
		self._codes = codes
		self._ordered = bool(ordered)
		self._name = name

	@classmethod
	def _from_parts(cls, level_set, codes, ordered=False, name=None):
		"""Assemble from an existing level set and matching codes (no re-encoding)."""
		codes = tuple(codes)
		n = len(level_set)
		for code in codes:
			if code != MISSING_CODE and not (0 <= code < n):
				raise IndexOutOfRangeError(f"Code {code} references no level ({n} levels)")
		instance = object.__new__(cls)
		instance._init_parts(level_set, codes, ordered, name)
		return instance

	@classmethod
	def from_codes(cls, codes, levels, ordered=False, name=None):
		"""
		Build a factor from integer codes into levels.

		None and MISSING_CODE (-1) are missing; any other code outside
		range(len(levels)) raises IndexOutOfRangeError.
		"""
		level_set = LevelSet.from_labels(levels)
		out = []
		for code in codes:
			if code is None:
				out.append(MISSING_CODE)
				continue
			if not isinstance(code, int) or isinstance(code, bool):
				raise PyFactorTypeError(f"Codes must be int, not {type(code).__name__}")
			out.append(code)
		return cls._from_parts(level_set, out, ordered, name)

	def _rebuild(self, level_set, codes):
		return PyFactor._from_parts(level_set, codes, self._ordered, self._name)

	#-----------------------------------------------------
	# Metadata
	#-----------------------------------------------------

	@property
	def levels(self):
		"""Level labels in report order."""
		return self._levels.labels

	@property
	def level_set(self):
		return self._levels

	@property
	def ordered(self):
		return self._ordered

	@property
	def name(self):
		return self._name

	def nlevels(self):
		return len(self._levels)

	def schema(self):
		"""Get the CategoricalType schema of this factor."""
		return CategoricalType(self._levels, ordered=self._ordered, nullable=self.has_missing())

	def size(self):
		if not self._codes:
			return tuple()
		return (len(self),)

	def rename(self, new_name):
		"""Return the same factor under a new name"""
		return PyFactor._from_parts(self._levels, self._codes, self._ordered, new_name)

	def as_ordered(self):
		return PyFactor._from_parts(self._levels, self._codes, True, self._name)

	def as_unordered(self):
		return PyFactor._from_parts(self._levels, self._codes, False, self._name)

	def equals(self, other):
		"""True if other has the same levels (in order), codes and orderedness."""
		return (
			isinstance(other, PyFactor)
			and self._levels == other._levels
			and self._codes == other._codes
			and self._ordered == other._ordered
		)

	def __repr__(self):
		return _printr(self)

	#-----------------------------------------------------
	# Reading observations
	#-----------------------------------------------------

	def __len__(self):
		return len(self._codes)

	def __iter__(self):
		""" iterate over the decoded labels """
		labels = self._levels.labels
		for code in self._codes:
			yield None if code == MISSING_CODE else labels[code]

	def __bool__(self):
		return bool(self._codes)

	def __getitem__(self, key):
		"""
		An int returns a single label (None if missing). Slices, boolean
		masks and integer lists return a PyFactor over the same level set,
		even if some levels no longer occur.
		"""
		if isinstance(key, int) and not isinstance(key, bool):
			code = self._codes[key]
			return None if code == MISSING_CODE else self._levels.labels[code]
		return self._take(select_positions(key, len(self)))

	def _take(self, positions):
		codes = self._codes
		return self._rebuild(self._levels, (codes[i] for i in positions))

	def __setitem__(self, key, value):
		raise PyFactorTypeError(
			"PyFactor does not support element assignment; "
			"use recode(..., where=mask) to change some observations."
		)

	def decode(self):
		"""Labels of every observation, following codes through the current levels."""
		return PyVector(self._levels.decode(self._codes),
			dtype=DataType(str, nullable=self.has_missing()),
			name=self._name)

	def raw_codes(self):
		"""
		The integer codes (0-based positions into levels; None for missing).

		Codes are storage, not data: they change whenever levels are
		reordered. Use as_numeric() to get numbers written in the labels.
		"""
		return PyVector(tuple(None if c == MISSING_CODE else c for c in self._codes),
			dtype=DataType(int, nullable=self.has_missing()),
			name=self._name)

	def as_numeric(self):
		"""
		The numeric value written in each observation's label.

		Raises NonNumericLevelError unless every level parses as a number.
		"""
		parsed = []
		bad = []
		for label in self._levels:
			value = parse_number(label)
			if value is None:
				bad.append(label)
			parsed.append(value)
		if bad:
			raise NonNumericLevelError(
				f"Levels are not numeric: {', '.join(repr(x) for x in bad)}. "
				"Use raw_codes() if the integer codes are really wanted."
			)
		return PyVector(tuple(None if c == MISSING_CODE else parsed[c] for c in self._codes),
			name=self._name)

	def isna(self):
		"""Return boolean mask of missing observations."""
		return PyVector(tuple(c == MISSING_CODE for c in self._codes), dtype=DataType(bool))

	def has_missing(self):
		return MISSING_CODE in self._codes

	def counts(self, include_missing=False):
		"""Occurrences of each level, in level order (see tally.count_1d)."""
		from .tally import count_1d
		return count_1d(self, include_missing=include_missing)

	#-----------------------------------------------------
	# Comparisons
	#-----------------------------------------------------

	def _other_labels(self, other):
		other = tuple(to_label(y) for y in other)
		if len(other) != len(self):
			raise PyFactorValueError(f"Cannot compare factor of length {len(self)} with length {len(other)}.")
		return other

	def _compare_labels(self, other, op):
		if _is_sequence(other):
			rhs = self._other_labels(other)
			return PyVector(tuple(False if (x is None or y is None) else op(x, y) for x, y in zip(self, rhs)),
				dtype=DataType(bool))
		label = to_label(other)
		if label is not None and label not in self._levels:
			warnings.warn(f"{label!r} is not a level of this factor.", stacklevel=3)
		return PyVector(tuple(False if (x is None or label is None) else op(x, label) for x in self),
			dtype=DataType(bool))

	def _compare_order(self, other, op):
		if not self._ordered:
			raise PyFactorTypeError(
				"Ordering comparisons need an ordered factor; use as_ordered() first."
			)
		index = self._levels.index
		if _is_sequence(other):
			rhs = [None if y is None else index(y) for y in self._other_labels(other)]
			return PyVector(tuple(False if (c == MISSING_CODE or r is None) else op(c, r) for c, r in zip(self._codes, rhs)),
				dtype=DataType(bool))
		target = index(to_label(other))
		return PyVector(tuple(False if c == MISSING_CODE else op(c, target) for c in self._codes),
			dtype=DataType(bool))

	def __eq__(self, other):
		return self._compare_labels(other, operator.eq)

	def __ne__(self, other):
		return self._compare_labels(other, operator.ne)

	def __lt__(self, other):
		return self._compare_order(other, operator.lt)

	def __le__(self, other):
		return self._compare_order(other, operator.le)

	def __gt__(self, other):
		return self._compare_order(other, operator.gt)

	def __ge__(self, other):
		return self._compare_order(other, operator.ge)

	__hash__ = None

	#-----------------------------------------------------
	# Display-level edits (codes untouched)
	#-----------------------------------------------------

	def _level_position(self, old):
		if isinstance(old, str):
			return self._levels.index(old)
		return self._levels.position(old)

	def rename_level(self, old, new_label):
		"""
		Change the label shown for one level, by index or current label.

		Every observation under that level now reads new_label; nothing else
		changes. Raises DuplicateLevelError if new_label is another level.
		"""
		level_set = self._levels.rename(self._level_position(old), new_label)
		return self._rebuild(level_set, self._codes)

	def rename_levels(self, mapping):
		"""
		Rename several levels at once. All renames apply together, so
		swapping two labels is allowed; the result must still be unique.
		"""
		labels = list(self._levels.labels)
		for old, new in mapping.items():
			label = to_label(new)
			if label is None:
				raise PyFactorValueError("A level cannot be renamed to a missing value")
			labels[self._level_position(old)] = label
		return self._rebuild(LevelSet(tuple(labels)), self._codes)

	#-----------------------------------------------------
	# Level-set rebuilds (decode, then re-encode)
	#-----------------------------------------------------

	def set_levels(self, new_levels, on_unknown="raise"):
		"""
		Re-resolve every observation against new_levels.

		Codes are recomputed from the decoded labels, so reordering or
		extending levels never changes what an observation says.
		"""
		level_set = LevelSet.from_labels(new_levels)
		codes = level_set.encode(self._levels.decode(self._codes), on_unknown=on_unknown)
		return self._rebuild(level_set, codes)

	def relevel(self, label):
		"""Move one level to the front, keeping the others in order."""
		first = self._levels.index(to_label(label))
		rest = [x for i, x in enumerate(self._levels) if i != first]
		return self.set_levels([self._levels[first]] + rest)

	def add_levels(self, labels):
		"""Append levels at the end; labels already present are skipped."""
		if not _is_sequence(labels):
			labels = (labels,)
		return self._rebuild(self._levels.extend(labels), self._codes)

	def drop_unused_levels(self):
		"""Restrict levels to those with at least one observation, in order."""
		used = sorted({c for c in self._codes if c != MISSING_CODE})
		if len(used) == len(self._levels):
			return self
		remap = {old: new for new, old in enumerate(used)}
		codes = tuple(MISSING_CODE if c == MISSING_CODE else remap[c] for c in self._codes)
		return self._rebuild(self._levels.take(used), codes)

	def recode(self, mapping, levels=None, where=None, keep_order=False):
		"""
		Change observation labels through a mapping and rebuild the levels.

		Parameters
		----------
		mapping : dict or callable
			old label -> new label. Labels missing from a dict stay as they
			are; mapping to None makes the observation missing.
		levels : iterable of str, optional
			Explicit order for the rebuilt level set.
		where : boolean mask, optional
			Only recode these observations.
		keep_order : bool
			Replace each old level in place by its new label instead of
			re-inferring (with where, the old level stays and the new label
			follows it). Unused levels are kept.

		By default the levels are re-inferred as the sorted labels present
		after recoding.
		"""
		if isinstance(mapping, dict):
			table = {to_label(k): v for k, v in mapping.items()}
			unknown = [k for k in table if k not in self._levels]
			if unknown:
				warnings.warn(f"Unknown levels in recode mapping: {unknown!r}", stacklevel=2)
			lookup = lambda label: table.get(label, label)
		elif callable(mapping):
			lookup = mapping
		else:
			raise PyFactorTypeError(f"mapping must be a dict or callable, not {type(mapping).__name__}")

		old = self._levels.labels
		images = [to_label(lookup(label)) for label in old]

		if where is None:
			new_labels = tuple(None if c == MISSING_CODE else images[c] for c in self._codes)
		else:
			flags = _bool_mask(where, len(self))
			if flags is None:
				raise PyFactorTypeError("where must be a boolean mask")
			new_labels = tuple(
				None if c == MISSING_CODE else (images[c] if flag else old[c])
				for c, flag in zip(self._codes, flags)
			)

		if levels is not None:
			level_set = LevelSet.from_labels(levels)
		elif keep_order:
			order = []
			for label, image in zip(old, images):
				if where is not None:
					order.append(label)
				if image is not None:
					order.append(image)
			level_set = LevelSet(tuple(dict.fromkeys(order)))
		else:
			level_set = LevelSet.infer(new_labels)
		return self._rebuild(level_set, level_set.encode(new_labels))

	def concatenate(self, other, levels=None):
		"""
		Observations of self followed by those of other.

		Both sides are decoded and re-encoded against one level set: levels
		if given, otherwise the shared level set when both are identical,
		else the sorted union. Raw codes are never appended.
		"""
		return concat(self, other, levels=levels)

	def __lshift__(self, other):
		""" The << operator concatenates, like PyVector """
		return self.concatenate(other)

	def append(self, values):
		"""
		Append observations, extending the level set with unseen labels in
		order of first appearance. Existing levels keep their positions.
		"""
		if not _is_sequence(values):
			values = (values,)
		values = tuple(values)
		level_set = self._levels.extend(values)
		return self._rebuild(level_set, self._codes + level_set.encode(values))

	def fillna(self, label):
		"""Replace missing observations with label, adding it as a last level if needed."""
		label = to_label(label)
		if label is None:
			raise PyFactorValueError("fillna needs a non-missing label")
		level_set = self._levels.extend((label,))
		code = level_set.index(label)
		return self._rebuild(level_set, tuple(code if c == MISSING_CODE else c for c in self._codes))


def concat(*columns, levels=None):
	"""
	Concatenate factors (or plain label sequences) into one PyFactor.

	Every column is decoded to labels and re-encoded against one level set:
	levels if given, else the common level set when all factors share it,
	else the sorted union of all level sets.
	"""
	if not columns:
		raise PyFactorValueError("concat needs at least one column")

	parts = []
	for col in columns:
		if isinstance(col, PyFactor):
			parts.append((tuple(col), col._levels, col._ordered))
		else:
			if not _is_sequence(col):
				col = (col,)
			labels = tuple(col)
			parts.append((labels, LevelSet.infer(labels), False))

	first_levels = parts[0][1]
	shared = all(p[1] == first_levels for p in parts)
	if levels is not None:
		level_set = LevelSet.from_labels(levels)
	elif shared:
		level_set = first_levels
	else:
		level_set = first_levels.union(*(p[1] for p in parts[1:]))

	ordered = shared and all(p[2] for p in parts) and level_set == first_levels
	codes = []
	for labels, _, _ in parts:
		codes.extend(level_set.encode(labels))

	name = columns[0]._name if isinstance(columns[0], (PyFactor, PyVector)) else None
	return PyFactor._from_parts(level_set, codes, ordered, name)
