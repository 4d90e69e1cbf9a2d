"""Column name sanitization and uniquification utilities."""

from __future__ import annotations
import re


def _get_reserved_names():
	"""Public PyTable methods and properties, which column attributes must not shadow.

	Computed on first use and cached on the function.
	"""
	if not hasattr(_get_reserved_names, '_cache'):
		from .table import PyTable

		reserved = set()
		for name in dir(PyTable):
			if name.startswith('_'):
				continue
			attr = getattr(PyTable, name, None)
			if callable(attr) or isinstance(attr, property):
				reserved.add(name.lower())

		_get_reserved_names._cache = reserved

	return _get_reserved_names._cache


def _sanitize_user_name(name) -> str | None:
	"""Sanitize column name to valid Python identifier.

	Rules:
	- Convert to lowercase
	- Replace runs of non-alphanumeric chars (except _) with single _
	- Strip leading/trailing underscores
	- Prefix with 'c' if starts with digit
	- Append '_' if it would shadow a PyTable method
	- Return None if empty after sanitization
	"""
	if not isinstance(name, str):
		name = str(name)

	sanitized = re.sub(r'[^a-z0-9_]+', '_', name.lower()).strip('_')

	if sanitized == "":
		return None

	if sanitized[0].isdigit():
		sanitized = "c" + sanitized

	if sanitized in _get_reserved_names():
		sanitized = sanitized + '_'

	return sanitized


def _uniquify(base: str, seen: set[str]) -> str:
	"""Make a unique name by adding __2, __3, etc if needed."""
	if base not in seen:
		return base

	i = 2
	while f"{base}__{i}" in seen:
		i += 1

	return f"{base}__{i}"
