"""Display and repr logic for PyVector, PyFactor and PyTable."""

from __future__ import annotations
from datetime import date
import math
from typing import List


# How many rows/columns to show before inserting "..."
MAX_HEAD_ROWS = 5
MAX_HEAD_COLS = 5

# How many level labels a factor repr lists
MAX_LEVELS_SHOWN = 10


def _needs_quoting(name: str) -> bool:
	"""A name needs quoting if it contains anything outside [A-Za-z0-9_]
	OR has leading/trailing whitespace."""
	if not name:
		return False
	if name != name.strip():
		return True
	return not all(c.isalnum() or c == "_" for c in name)


def _is_categorical(col) -> bool:
	schema = col.schema()
	return schema is not None and schema.is_categorical


def _dtype_name(col) -> str:
	schema = col.schema()
	if schema is None:
		return "object"
	if schema.is_categorical:
		return "ordered factor" if schema.ordered else "factor"
	return schema.kind.__name__


def _right_aligned(col) -> bool:
	schema = col.schema()
	return schema is not None and schema.is_numeric


def _format_value(v, kind, categorical) -> str:
	if v is None:
		return "None"
	if categorical:
		# Factor labels print bare; quotes would suggest plain text
		return str(v)
	if kind is float:
		if math.isfinite(v) and v == int(v):
			return f"{v:.1f}"
		return f"{v:g}"
	if kind is not None and issubclass(kind, date):
		return v.isoformat()
	if kind is str:
		return repr(v)
	return str(v)


def _format_column(col, max_preview: int = MAX_HEAD_ROWS) -> List[str]:
	"""Returns a list of strings representing that column, truncated for display."""
	vals = tuple(col)
	truncated = len(vals) > max_preview * 2
	if truncated:
		preview = list(vals[:max_preview]) + list(vals[-max_preview:])
	else:
		preview = list(vals)

	schema = col.schema()
	kind = schema.kind if schema is not None else None
	categorical = _is_categorical(col)
	out = [_format_value(v, kind, categorical) for v in preview]
	if truncated:
		out.insert(max_preview, '...')

	max_len = max(len(s) for s in out) if out else 0
	if _right_aligned(col):
		return [s.rjust(max_len) for s in out]
	return [s.ljust(max_len) for s in out]


def _levels_line(factor) -> str:
	levels = list(factor.levels)
	if len(levels) > MAX_LEVELS_SHOWN:
		half = MAX_LEVELS_SHOWN // 2
		levels = levels[:half] + ["..."] + levels[-half:]
	sep = " < " if factor.ordered else " "
	return "Levels: " + sep.join(levels)


def _compute_headers(cols, col_indices, sanitize_func, uniquify_func):
	"""Given PyTable columns and indices, returns display_names, sanitized_names, dtypes."""
	display_names = []
	sanitized_names = []
	dtypes = []
	seen = set()

	for idx in col_indices:
		col = cols[idx]
		display_names.append(col.name or "")

		san = None
		if col.name:
			san = sanitize_func(col.name)
			if san is not None:
				san = uniquify_func(san, seen)
				seen.add(san)
		sanitized_names.append(san or f"col{idx}_")

		dtypes.append(_dtype_name(col))

	return display_names, sanitized_names, dtypes


def _header_rows(display_names, sanitized_names):
	"""Decide which header rows to show based on display vs sanitized names."""
	any_display = any(n for n in display_names if n != "...")
	any_mismatch = any(
		disp and san and disp != san and san != "..."
		for disp, san in zip(display_names, sanitized_names)
	)

	rows = []

	# Row 1: display names (quoted if needed)
	if any_display:
		row = []
		for name in display_names:
			if name == "...":
				row.append("...")
			elif _needs_quoting(name):
				row.append(repr(name))
			else:
				row.append(name)
		rows.append(row)

	# Row 2: sanitized names (if mismatch or no display names)
	if any_mismatch or not any_display:
		rows.append([("." + san) if san != "..." else san for san in sanitized_names])

	return rows


def _align_columns(formatted_cols, header_rows, right_flags):
	"""Pad columns and headers to consistent widths."""
	col_widths = []
	for c, body in enumerate(formatted_cols):
		body_width = max((len(s) for s in body), default=0)
		header_width = max((len(row[c]) for row in header_rows), default=0)
		col_widths.append(max(body_width, header_width))

	def pad(s, c):
		return s.rjust(col_widths[c]) if right_flags[c] else s.ljust(col_widths[c])

	aligned_cols = [[pad(s, c) for s in body] for c, body in enumerate(formatted_cols)]
	aligned_headers = [[pad(h, c) for c, h in enumerate(row)] for row in header_rows]
	return aligned_cols, aligned_headers


def _footer(pv, dtype_list=None, truncated=False, shown=MAX_HEAD_COLS) -> str:
	"""Generate footer line based on shape and dtypes."""
	shape = pv.size()
	if len(shape) == 2:
		rows, cols = shape
		if cols == 0:
			return "# 0×0 table"
		if truncated:
			d = ", ".join(dtype_list[:shown]) + ", ..., " + ", ".join(dtype_list[-shown:])
		else:
			d = ", ".join(dtype_list)
		return f"# {rows}×{cols} table <{d}>"

	if _is_categorical(pv):
		kind = "ordered factor" if pv.ordered else "factor"
		return f"# {len(pv)} element {kind} <{pv.nlevels()} levels>"

	if not shape:
		return "# empty"
	return f"# {len(pv)} element vector <{_dtype_name(pv)}>"


def _repr_vector(v) -> str:
	"""Pretty repr for a PyVector or PyFactor."""
	formatted = _format_column(v)
	right = _right_aligned(v)

	width = max((len(s) for s in formatted), default=0)
	header_text = None
	if v.name:
		header_text = repr(v.name) if _needs_quoting(v.name) else v.name
		width = max(width, len(header_text))

	lines = []
	if header_text is not None:
		lines.append(header_text.rjust(width) if right else header_text.ljust(width))
	lines.extend(s.rjust(width) if right else s.ljust(width) for s in formatted)
	lines.append("")
	if _is_categorical(v):
		lines.append(_levels_line(v))
	lines.append(_footer(v))
	return "\n".join(lines)


def _repr_table(tbl) -> str:
	"""Pretty repr for a PyTable."""
	from .naming import _sanitize_user_name, _uniquify

	cols = tbl.cols()
	num_cols = len(cols)

	if num_cols == 0:
		return "# 0×0 table"

	truncated = num_cols > MAX_HEAD_COLS * 2
	if truncated:
		col_indices = list(range(MAX_HEAD_COLS)) + list(range(num_cols - MAX_HEAD_COLS, num_cols))
	else:
		col_indices = list(range(num_cols))

	disp, san, _ = _compute_headers(cols, col_indices, _sanitize_user_name, _uniquify)
	dtypes_all = [_dtype_name(col) for col in cols]

	formatted_cols = [_format_column(cols[i]) for i in col_indices]
	right_flags = [_right_aligned(cols[i]) for i in col_indices]

	if truncated:
		formatted_cols.insert(MAX_HEAD_COLS, ["..." for _ in range(len(formatted_cols[0]))])
		disp.insert(MAX_HEAD_COLS, "...")
		san.insert(MAX_HEAD_COLS, "...")
		right_flags.insert(MAX_HEAD_COLS, False)

	header_rows = _header_rows(disp, san)
	aligned_cols, aligned_headers = _align_columns(formatted_cols, header_rows, right_flags)

	lines = ["  ".join(hrow) for hrow in aligned_headers]
	nrows = len(aligned_cols[0]) if aligned_cols else 0
	for r in range(nrows):
		lines.append("  ".join(col[r] for col in aligned_cols))

	lines.append("")
	lines.append(_footer(tbl, dtypes_all, truncated, MAX_HEAD_COLS))
	return "\n".join(lines)


def _printr(pv) -> str:
	"""Entry point used by the __repr__ of PyVector, PyFactor and PyTable."""
	if len(pv.size()) == 2:
		return _repr_table(pv)
	return _repr_vector(pv)
