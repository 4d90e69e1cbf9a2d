"""Numbers written in labels vs. integer codes"""
import pytest
from py_factor import PyFactor
from py_factor.errors import NonNumericLevelError


class TestAsNumeric:
    """as_numeric reads labels; raw_codes exposes storage"""

    def test_labels_not_codes(self):
        f = PyFactor(["1", "4", "8", "10", "1", "8", "8", "8", "10"])
        assert list(f.as_numeric()) == [1, 4, 8, 10, 1, 8, 8, 8, 10]
        # text levels sort as text, so the codes say nothing about magnitude
        assert f.levels == ("1", "10", "4", "8")
        assert list(f.raw_codes()) == [0, 2, 3, 1, 0, 3, 3, 3, 1]

    def test_floats(self):
        f = PyFactor(["0.5", "1.25", "0.5"])
        assert list(f.as_numeric()) == [0.5, 1.25, 0.5]

    def test_numeric_input(self):
        f = PyFactor([10, 2, 2])
        assert f.levels == ("2", "10")
        assert list(f.raw_codes()) == [1, 0, 0]
        assert list(f.as_numeric()) == [10, 2, 2]

    def test_result_dtype(self):
        f = PyFactor(["3", "1"])
        assert f.as_numeric().schema().kind is int

    def test_missing_stays_missing(self):
        f = PyFactor(["3", None])
        assert list(f.as_numeric()) == [3, None]

    def test_non_numeric_level(self):
        with pytest.raises(NonNumericLevelError):
            PyFactor(["1", "two"]).as_numeric()

    def test_unused_non_numeric_level(self):
        f = PyFactor(["1"], levels=["1", "n/a"])
        with pytest.raises(NonNumericLevelError):
            f.as_numeric()

    def test_non_numeric_is_a_value_error(self):
        with pytest.raises(ValueError):
            PyFactor(["x"]).as_numeric()

    def test_unchanged_by_level_order(self):
        f = PyFactor(["1", "4", "8", "10"])
        g = f.set_levels(["10", "8", "4", "1"])
        assert list(g.as_numeric()) == list(f.as_numeric())
        assert list(g.raw_codes()) != list(f.raw_codes())


class TestRawCodes:
    def test_missing_code_reported_as_none(self):
        f = PyFactor(["b", None, "a"])
        assert list(f.raw_codes()) == [1, None, 0]

    def test_codes_follow_level_order(self):
        f = PyFactor(["Small", "Large"], levels=["Small", "Medium", "Large"])
        assert list(f.raw_codes()) == [0, 2]
