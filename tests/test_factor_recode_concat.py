"""Recoding and concatenation rebuild levels from labels, never from raw codes"""
import pytest
from py_factor import PyFactor, PyVector, concat
from py_factor.errors import LevelMismatchError, PyFactorTypeError, PyFactorValueError


def _names():
    a = PyFactor(["Joe", "Ted", "Fred", "Joe"], levels=["Joe", "Ted", "Fred"], name="who")
    b = PyFactor(["Anne", "Louise", "Louise", "Lucy", "Louise"], levels=["Anne", "Louise", "Lucy"])
    return a, b


class TestRecode:
    """recode maps labels and rebuilds the level set"""

    def test_merge_levels(self):
        f = PyFactor(["cat", "dog", "kitten", "puppy"], levels=["cat", "kitten", "dog", "puppy"])
        g = f.recode({"kitten": "cat", "puppy": "dog"})
        assert list(g) == ["cat", "dog", "cat", "dog"]
        assert g.levels == ("cat", "dog")

    def test_levels_reinferred_by_default(self):
        f = PyFactor(["b", "a", "c"])
        g = f.recode({"b": "z"})
        assert g.levels == ("a", "c", "z")
        assert list(g) == ["z", "a", "c"]

    def test_keep_order_puts_new_label_in_old_position(self):
        f = PyFactor(["b", "a", "c"])
        g = f.recode({"b": "z"}, keep_order=True)
        assert g.levels == ("a", "z", "c")
        assert list(g) == ["z", "a", "c"]

    def test_explicit_levels(self):
        f = PyFactor(["b", "a", "c"])
        g = f.recode({"b": "z"}, levels=["z", "c", "a"])
        assert g.levels == ("z", "c", "a")
        assert list(g) == ["z", "a", "c"]

    def test_explicit_levels_must_cover_labels(self):
        f = PyFactor(["b", "a", "c"])
        with pytest.raises(LevelMismatchError):
            f.recode({"b": "z"}, levels=["a", "c"])

    def test_map_to_none_makes_missing(self):
        f = PyFactor(["b", "a", "c"])
        g = f.recode({"b": None})
        assert list(g) == [None, "a", "c"]
        assert g.levels == ("a", "c")

    def test_unused_levels_dropped_by_default(self):
        f = PyFactor(["a"], levels=["a", "b"])
        assert f.recode({"a": "x"}).levels == ("x",)

    def test_keep_order_keeps_unused_levels(self):
        f = PyFactor(["a"], levels=["a", "b"])
        assert f.recode({"a": "x"}, keep_order=True).levels == ("x", "b")

    def test_callable(self):
        f = PyFactor(["b", "a", "c"])
        g = f.recode(str.upper)
        assert g.levels == ("A", "B", "C")
        assert list(g) == ["B", "A", "C"]

    def test_where_changes_only_selected_observations(self):
        f = PyFactor(["M", "F", "M", "M"], name="sex")
        g = f.recode({"M": "F"}, where=PyVector([False, False, True, False]))
        assert list(g) == ["M", "F", "F", "M"]
        assert g.levels == ("F", "M")
        assert g.name == "sex"

    def test_where_reinfers_present_labels(self):
        f = PyFactor(["a", "b", "a"])
        g = f.recode({"a": "z"}, where=[True, False, False])
        assert list(g) == ["z", "b", "a"]
        assert g.levels == ("a", "b", "z")

    def test_where_keep_order_keeps_old_level(self):
        f = PyFactor(["a", "b"])
        g = f.recode({"a": "z"}, where=[True, False], keep_order=True)
        assert list(g) == ["z", "b"]
        assert g.levels == ("a", "z", "b")
        assert g.counts() == {"a": 0, "z": 1, "b": 1}

    def test_where_with_factor_comparison(self):
        f = PyFactor(["x", "y", "x"])
        g = f.recode({"x": "w"}, where=f == "x")
        assert list(g) == ["w", "y", "w"]

    def test_where_must_be_a_mask(self):
        with pytest.raises(PyFactorTypeError):
            PyFactor(["a", "b"]).recode({"a": "z"}, where=[0, 1])

    def test_where_length_mismatch(self):
        with pytest.raises(PyFactorValueError):
            PyFactor(["a", "b"]).recode({"a": "z"}, where=[True])

    def test_unknown_key_warns(self):
        f = PyFactor(["a", "b"])
        with pytest.warns(UserWarning, match="Unknown levels"):
            g = f.recode({"zz": "a"})
        assert g.equals(f)

    def test_bad_mapping(self):
        with pytest.raises(PyFactorTypeError):
            PyFactor(["a"]).recode(42)

    def test_keeps_orderedness(self):
        f = PyFactor(["lo", "hi"], levels=["lo", "hi"], ordered=True)
        assert f.recode({"hi": "high"}).ordered


class TestConcatenate:
    """Concatenation decodes both sides and re-encodes against one level set"""

    def test_different_level_sets_join_by_label(self):
        a, b = _names()
        c = a.concatenate(b)
        assert len(c) == 9
        assert list(c) == list(a.decode()) + list(b.decode())
        assert c.levels == ("Anne", "Fred", "Joe", "Louise", "Lucy", "Ted")

    def test_raw_codes_are_not_appended(self):
        a, b = _names()
        c = a.concatenate(b)
        naive = [a.levels[code] for code in list(a.raw_codes()) + list(b.raw_codes())]
        assert list(c) != naive

    def test_lshift(self):
        a, b = _names()
        assert (a << b).equals(a.concatenate(b))

    def test_caller_level_order(self):
        a, b = _names()
        order = ["Ted", "Joe", "Fred", "Lucy", "Louise", "Anne"]
        c = a.concatenate(b, levels=order)
        assert c.levels == tuple(order)
        assert list(c) == list(a) + list(b)

    def test_caller_levels_must_cover_both(self):
        a, b = _names()
        with pytest.raises(LevelMismatchError):
            a.concatenate(b, levels=["Joe", "Ted", "Fred"])

    def test_shared_level_set_kept(self):
        a = PyFactor(["lo"], levels=["lo", "hi"], ordered=True)
        b = PyFactor(["hi"], levels=["lo", "hi"], ordered=True)
        c = a << b
        assert c.levels == ("lo", "hi")
        assert c.ordered
        assert list(c) == ["lo", "hi"]

    def test_mixed_level_sets_are_unordered(self):
        a = PyFactor(["lo"], levels=["lo", "hi"], ordered=True)
        b = PyFactor(["mid"], levels=["mid"], ordered=True)
        assert not (a << b).ordered

    def test_unused_levels_join_the_union(self):
        a = PyFactor(["a"], levels=["a", "q"])
        assert (a << PyFactor(["b"])).levels == ("a", "b", "q")

    def test_numeric_labels_union_sorts_by_value(self):
        c = concat(PyFactor([1, 2, 10]), PyFactor([3]))
        assert c.levels == PyFactor([1, 2, 10, 3]).levels
        assert c.levels == ("1", "2", "3", "10")
        assert list(c) == ["1", "2", "10", "3"]

    def test_plain_sequence(self):
        a, _ = _names()
        c = a.concatenate(["Zed"])
        assert c[-1] == "Zed"
        assert "Zed" in c.levels

    def test_missing_preserved(self):
        c = PyFactor(["a", None]) << PyFactor([None, "b"])
        assert list(c) == ["a", None, None, "b"]

    def test_name_from_first_column(self):
        a, b = _names()
        assert (a << b).name == "who"

    def test_concat_many(self):
        a, b = _names()
        c = concat(a, b, ["x"])
        assert len(c) == 10
        assert list(c)[-1] == "x"

    def test_concat_needs_a_column(self):
        with pytest.raises(PyFactorValueError):
            concat()


class TestAppend:
    """append extends the level set; existing levels keep their positions"""

    def test_unseen_labels_appended_in_order(self):
        f = PyFactor(["b", "a"], levels=["b", "a"])
        g = f.append(["c", "a", "d"])
        assert g.levels == ("b", "a", "c", "d")
        assert list(g) == ["b", "a", "c", "a", "d"]

    def test_append_factor_reads_labels(self):
        f = PyFactor(["b", "a"], levels=["b", "a"])
        g = f.append(PyFactor(["z", "b"]))
        assert g.levels == ("b", "a", "z")
        assert list(g) == ["b", "a", "z", "b"]

    def test_append_scalar(self):
        f = PyFactor(["b"])
        assert list(f.append("b")) == ["b", "b"]

    def test_append_missing(self):
        f = PyFactor(["b"])
        g = f.append([None])
        assert list(g) == ["b", None]
        assert g.levels == ("b",)
