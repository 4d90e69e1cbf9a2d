from .coercion import DEFAULT_POLICY
from .coercion import coerce_column
from .coercion import reconcile_column
from .errors import PyFactorKeyError, PyFactorValueError, PyFactorTypeError
from .factor import PyFactor
from .naming import _sanitize_user_name, _uniquify
from .tally import count_nd, crosstab
from .vector import PyVector, _is_sequence, select_positions


def _missing_col_error(name, context="PyTable"):
	return PyFactorKeyError(f"Column '{name}' not found in {context}")


class _RowView:
	"""Lightweight row view for iterating over table rows with attribute access."""
	__slots__ = ('_cols', '_names', '_column_map', '_index')

	def __init__(self, table, index):
		# Decode every column once; factors yield their labels
		self._cols = [tuple(col) for col in table._columns]
		self._names = table.names()
		self._column_map = table._column_map
		self._index = index

	def set_index(self, index):
		"""Reuse this row view for a different index (avoids allocation during iteration)."""
		self._index = index
		return self

	def __getattr__(self, attr):
		"""Access column values by sanitized attribute name."""
		col_idx = self._column_map.get(attr.lower())
		if col_idx is None:
			raise AttributeError(f"Row has no attribute '{attr}'")
		return self._cols[col_idx][self._index]

	def __getitem__(self, key):
		"""Access column values by index or name."""
		if isinstance(key, int):
			return self._cols[key][self._index]
		if isinstance(key, str):
			if key in self._names:
				return self._cols[self._names.index(key)][self._index]
			return getattr(self, key)
		raise TypeError(f"Row indices must be int or str, not {type(key).__name__}")

	def __iter__(self):
		"""Iterate over column values in this row."""
		idx = self._index
		for col in self._cols:
			yield col[idx]

	def __len__(self):
		return len(self._cols)

	def as_dict(self):
		idx = self._index
		return {name: col[idx] for name, col in zip(self._names, self._cols)}

	def __repr__(self):
		idx = self._index
		values = [repr(col[idx]) for col in self._cols]
		return f"Row({idx}: {', '.join(values)})"


class PyTable():
	""" Named columns of the same length; categorical columns are PyFactors """
	_columns = ()
	_length = 0
	_column_map = None
	_policy = DEFAULT_POLICY

	def __init__(self, initial=(), policy=None):
		"""
		Build a table from a dict {name: values} or a sequence of named
		PyVector / PyFactor columns.

		policy (a CoercionPolicy) decides which columns become factors. Raw
		text stays plain unless the policy asks for factors.
		"""
		self._policy = policy or DEFAULT_POLICY
		if isinstance(initial, PyTable):
			initial = initial._columns
		if isinstance(initial, dict):
			pairs = list(initial.items())
		else:
			pairs = []
			for col in initial:
				if not isinstance(col, (PyVector, PyFactor)):
					raise PyFactorTypeError(
						"Columns must be PyVector or PyFactor instances; pass a dict to name raw sequences"
					)
				pairs.append((col.name, col))

		columns = tuple(coerce_column(name, values, self._policy) for name, values in pairs)
		self._set_columns(columns)

	def _set_columns(self, columns):
		lengths = {len(c) for c in columns}
		if len(lengths) > 1:
			raise PyFactorValueError(f"All columns must have the same length, got {sorted(lengths)}")
		self._columns = columns
		self._length = lengths.pop() if lengths else 0
		self._column_map = self._build_column_map()

	@classmethod
	def _from_columns(cls, columns, policy):
		"""Wrap already-coerced columns without running the policy again."""
		table = object.__new__(cls)
		table._policy = policy
		table._set_columns(tuple(columns))
		return table

	@classmethod
	def from_rows(cls, rows, policy=None):
		"""
		Build a table from a list of row dicts sharing the same keys.

		>>> PyTable.from_rows([{"size": "S", "n": 1}, {"size": "L", "n": 2}]).names()
		('size', 'n')
		"""
		return cls(_rows_to_columns(rows), policy=policy)

	@property
	def policy(self):
		return self._policy

	def __len__(self):
		return self._length

	def size(self):
		return (self._length, len(self._columns))

	def names(self):
		return tuple(col.name for col in self._columns)

	def cols(self, key=None):
		if isinstance(key, (int, slice)):
			return self._columns[key]
		return self._columns

	def _build_column_map(self):
		"""Build mapping from sanitized column names to column indices.

		Computed once per table and used for attribute access and by
		_RowView for O(1) lookups during iteration.
		"""
		column_map = {}
		seen = set()
		for idx, col in enumerate(self._columns):
			sanitized = None
			if col.name is not None:
				base = _sanitize_user_name(col.name)
				if base is not None:
					sanitized = _uniquify(base, seen)
					seen.add(sanitized)
			if sanitized is None:
				# Unnamed or unsanitizable column, use system name
				sanitized = f'col{idx}_'
			column_map[sanitized] = idx
		return column_map

	def __dir__(self):
		"""Return list of available attributes including sanitized column names."""
		base_attrs = object.__dir__(self)
		return sorted(set(base_attrs + list(self._column_map.keys())))

	def __getattr__(self, attr):
		"""Access columns by sanitized attribute name using pre-computed column map."""
		if attr.startswith('_'):
			raise AttributeError(attr)
		col_idx = self._column_map.get(attr.lower())
		if col_idx is not None:
			return self._columns[col_idx]
		raise AttributeError(f"{self.__class__.__name__!s} object has no attribute '{attr}'")

	def _column_index(self, name):
		"""Exact name first, then sanitized (case-insensitive) name."""
		for idx, col in enumerate(self._columns):
			if col.name == name:
				return idx
		col_idx = self._column_map.get(name.lower())
		if col_idx is None:
			raise _missing_col_error(name)
		return col_idx

	def __getitem__(self, key):
		# Column by name
		if isinstance(key, str):
			return self._columns[self._column_index(key)]

		# Multiple columns by name
		if isinstance(key, tuple) and all(isinstance(k, str) for k in key):
			return PyTable._from_columns((self._columns[self._column_index(k)] for k in key), self._policy)

		# Single row
		if isinstance(key, int) and not isinstance(key, bool):
			n = self._length
			idx = key + n if key < 0 else key
			if not (0 <= idx < n):
				raise IndexError(f"Row {key} out of range for table with {n} rows")
			return _RowView(self, idx)

		return self.filter(key)

	def filter(self, key):
		"""
		Rows selected by a boolean mask, slice or integer list.

		Factor columns keep their full level set, including levels that no
		longer occur in the selected rows.
		"""
		positions = select_positions(key, self._length)
		return PyTable._from_columns((col._take(positions) for col in self._columns), self._policy)

	def __iter__(self):
		"""Iterate over rows using a reusable _RowView for memory efficiency."""
		row_view = _RowView(self, 0)
		for i in range(len(self)):
			row_view.set_index(i)
			yield row_view

	def __repr__(self):
		from .display import _printr
		return _printr(self)

	def rename_column(self, old_name, new_name):
		"""Return a table with one column renamed."""
		idx = self._column_index(old_name)
		columns = list(self._columns)
		columns[idx] = columns[idx].rename(new_name)
		return PyTable._from_columns(columns, self._policy)

	def append_rows(self, new_rows):
		"""
		Return a table with new_rows added below the existing rows.

		new_rows may be a PyTable, a dict {name: values} (or a single row
		{name: value}), or a list of row dicts. Column names must match this
		table's exactly.

		Factor columns are extended, never rebuilt: existing levels keep
		their order (including levels with no rows) and unseen labels are
		appended after them.
		"""
		incoming = _normalize_rows(new_rows)

		if not self._columns:
			return PyTable(incoming, policy=self._policy)

		names = self.names()
		if len(set(names)) != len(names):
			raise PyFactorValueError("append_rows requires unique column names")

		missing = [n for n in names if n not in incoming]
		if missing:
			raise PyFactorKeyError(f"New rows are missing columns: {missing}")
		extra = [n for n in incoming if n not in names]
		if extra:
			raise PyFactorKeyError(f"New rows have unknown columns: {extra}")

		lengths = {len(v) for v in incoming.values()}
		if len(lengths) > 1:
			raise PyFactorValueError(f"New rows have columns of different lengths: {sorted(lengths)}")

		columns = tuple(reconcile_column(col, incoming[col.name], self._policy) for col in self._columns)
		return PyTable._from_columns(columns, self._policy)

	def tally(self, *names, include_missing=False):
		"""Cross-tabulate the named columns (see tally.count_nd)."""
		return count_nd([self[n] for n in names], include_missing=include_missing)

	def crosstab(self, *names, include_missing=False):
		"""Long-form cross-tabulation of the named columns as a PyTable."""
		cols = [self[n] for n in names]
		return crosstab(*cols, names=[c.name for c in cols], include_missing=include_missing)


def _rows_to_columns(rows):
	"""[{name: value}, ...] -> {name: [values]} with every row carrying the same names."""
	rows = list(rows)
	if not rows:
		return {}
	for i, row in enumerate(rows):
		if not isinstance(row, dict):
			raise PyFactorTypeError(f"Row {i} must be a dict, not {type(row).__name__}")
	names = list(rows[0])
	for i, row in enumerate(rows):
		if set(row) != set(names):
			raise PyFactorKeyError(
				f"Row {i} has columns {sorted(row)}, expected {sorted(names)}"
			)
	return {name: [row[name] for row in rows] for name in names}


def _normalize_rows(new_rows):
	"""Accepted append_rows inputs -> {name: sequence of values}."""
	if isinstance(new_rows, PyTable):
		return {col.name: col for col in new_rows.cols()}
	if isinstance(new_rows, dict):
		values = list(new_rows.values())
		if values and not any(_is_sequence(v) for v in values):
			# one row given as {name: value}
			return {name: [value] for name, value in new_rows.items()}
		if not all(_is_sequence(v) for v in values):
			raise PyFactorTypeError("Mix of scalars and sequences in new rows")
		return dict(new_rows)
	if isinstance(new_rows, (list, tuple)):
		return _rows_to_columns(new_rows)
	raise PyFactorTypeError(
		f"New rows must be a PyTable, a dict or a list of dicts, not {type(new_rows).__name__}"
	)
