class PyFactorError(Exception):
    """Base exception for py-factor library."""
    pass


class PyFactorKeyError(PyFactorError, KeyError):
    """Raised when a column/key is missing."""
    pass


class PyFactorTypeError(PyFactorError, TypeError):
    """Raised for invalid types in API calls."""
    pass


class PyFactorValueError(PyFactorError, ValueError):
    """Raised for invalid values or mismatched lengths."""
    pass


class PyFactorIndexError(PyFactorError, IndexError):
    """Raised for invalid indexing operations."""
    pass


class LevelMismatchError(PyFactorValueError):
    """Raised when a label is not part of a closed level set."""
    pass


class DuplicateLevelError(PyFactorValueError):
    """Raised when a level set would contain the same label twice."""
    pass


class NonNumericLevelError(PyFactorValueError):
    """Raised when numeric values are requested but a level label is not a number."""
    pass


class IndexOutOfRangeError(PyFactorIndexError):
    """Raised when a code references a level that does not exist."""
    pass
