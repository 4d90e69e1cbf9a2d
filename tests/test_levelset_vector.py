"""LevelSet, DataType inference and PyVector basics"""
import pytest
from py_factor import CategoricalType, DataType, LevelSet, MISSING_CODE, PyVector
from py_factor.errors import (
    DuplicateLevelError,
    IndexOutOfRangeError,
    LevelMismatchError,
    PyFactorIndexError,
    PyFactorTypeError,
    PyFactorValueError,
)
from py_factor.typing import infer_dtype


class TestLevelSet:
    """Ordered, unique string labels"""

    def test_infer_sorts_numbers_numerically(self):
        assert LevelSet.infer([10, 1, 4, 1]).labels == ("1", "4", "10")

    def test_infer_mixed_types_sorts_by_text(self):
        assert LevelSet.infer([2, "a", 1]).labels == ("1", "2", "a")

    def test_infer_skips_missing(self):
        assert LevelSet.infer([None, "b", float("nan"), "a"]).labels == ("a", "b")

    def test_first_seen(self):
        assert LevelSet.first_seen(["b", "a", "b", None]).labels == ("b", "a")

    def test_none_is_not_a_level(self):
        with pytest.raises(PyFactorValueError):
            LevelSet(("a", None))

    def test_labels_are_strings(self):
        with pytest.raises(PyFactorTypeError):
            LevelSet(("a", 1))

    def test_duplicates(self):
        with pytest.raises(DuplicateLevelError):
            LevelSet.from_labels(["a", "b", "a"])

    def test_single_string_is_not_a_level_list(self):
        with pytest.raises(PyFactorTypeError):
            LevelSet.from_labels("abc")

    def test_order_matters_for_equality(self):
        assert LevelSet(("a", "b")) == LevelSet(("a", "b"))
        assert LevelSet(("a", "b")) != LevelSet(("b", "a"))

    def test_encode_and_decode(self):
        levels = LevelSet(("x", "y"))
        codes = levels.encode(["y", None, "x"])
        assert codes == (1, MISSING_CODE, 0)
        assert levels.decode(codes) == ("y", None, "x")

    def test_encode_unknown_message(self):
        with pytest.raises(LevelMismatchError, match="on_unknown='missing'"):
            LevelSet(("x",)).encode(["x", "z"])

    def test_decode_bad_code(self):
        with pytest.raises(IndexOutOfRangeError):
            LevelSet(("x",)).decode([1])

    def test_index_and_position(self):
        levels = LevelSet(("x", "y", "z"))
        assert levels.index("z") == 2
        assert levels.position(-1) == 2
        with pytest.raises(LevelMismatchError):
            levels.index("w")
        with pytest.raises(PyFactorIndexError):
            levels.position(3)

    def test_extend_keeps_existing_order(self):
        levels = LevelSet(("b", "a"))
        assert levels.extend(["c", "a", "d"]).labels == ("b", "a", "c", "d")
        assert levels.extend(["a"]) is levels

    def test_union_is_sorted(self):
        assert LevelSet(("b", "a")).union(["c", "a"]).labels == ("a", "b", "c")

    def test_union_of_numeric_labels_sorts_by_value(self):
        union = LevelSet(("1", "2", "10")).union(LevelSet(("3",)), ["2.5"])
        assert union.labels == ("1", "2", "2.5", "3", "10")

    def test_union_with_text_label_sorts_as_text(self):
        assert LevelSet(("2", "10")).union(["x"]).labels == ("10", "2", "x")

    def test_rename(self):
        levels = LevelSet(("a", "b"))
        assert levels.rename(1, "B").labels == ("a", "B")
        with pytest.raises(DuplicateLevelError):
            levels.rename(1, "a")


class TestTypes:
    def test_datatype_repr(self):
        assert repr(DataType(int)) == "<int>"
        assert repr(DataType(str, nullable=True)) == "<str nullable>"

    def test_categorical_type_repr(self):
        levels = LevelSet(("a", "b", "c"))
        assert repr(CategoricalType(levels)) == "<factor[3]>"
        assert repr(CategoricalType(levels, ordered=True, nullable=True)) == "<ordered factor[3] nullable>"

    def test_categorical_type_depends_on_level_order(self):
        a = CategoricalType(LevelSet(("a", "b")))
        b = CategoricalType(LevelSet(("b", "a")))
        assert a == CategoricalType(LevelSet(("a", "b")))
        assert a != b

    @pytest.mark.parametrize("values,expected", [
        ([1, 2, 3], DataType(int)),
        ([1, 2.5], DataType(float)),
        ([None, "a"], DataType(str, nullable=True)),
        ([], DataType(object, nullable=True)),
    ])
    def test_infer_dtype(self, values, expected):
        assert infer_dtype(values) == expected

    def test_incompatible_values_degrade_to_object(self):
        with pytest.warns(UserWarning, match="Degrading"):
            dtype = infer_dtype([1, "a"])
        assert dtype.kind is object


class TestPyVector:
    """Immutable plain columns"""

    def test_inferred_schema(self):
        assert PyVector([1, 2]).schema() == DataType(int)
        assert PyVector([]).schema() is None

    def test_immutable(self):
        v = PyVector([1, 2])
        with pytest.raises(PyFactorTypeError):
            v[0] = 5

    def test_mask_and_slice(self):
        v = PyVector([1, 2, 3, 4])
        assert list(v[v > 2]) == [3, 4]
        assert list(v[1:3]) == [2, 3]
        assert list(v[[3, 0]]) == [4, 1]

    def test_mask_length_mismatch(self):
        with pytest.raises(PyFactorValueError):
            PyVector([1, 2])[[True]]

    def test_bad_index_type(self):
        with pytest.raises(PyFactorTypeError):
            PyVector([1, 2])[1.5]

    def test_concatenate(self):
        v = PyVector([1], name="n") << [2, 3]
        assert list(v) == [1, 2, 3]
        assert v.name == "n"

    def test_isna_dropna(self):
        v = PyVector([1, None, 3])
        assert list(v.isna()) == [False, True, False]
        assert list(v.dropna()) == [1, 3]

    def test_unique(self):
        assert list(PyVector(["b", "a", "b"]).unique()) == ["b", "a"]

    def test_boolean_context_warns(self):
        v = PyVector([True, False])
        with pytest.warns(UserWarning):
            bool(v)

    def test_invert(self):
        assert list(~PyVector([True, False])) == [False, True]
        with pytest.raises(PyFactorTypeError):
            ~PyVector([1])

    def test_as_factor(self):
        f = PyVector(["b", "a"], name="x").as_factor(levels=["b", "a"], ordered=True)
        assert f.levels == ("b", "a")
        assert f.ordered
        assert f.name == "x"
