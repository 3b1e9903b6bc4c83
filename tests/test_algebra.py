"""Tests for numeric operation bundles and their registry.

The registry must:

  - ship with built-in bundles pre-registered at import time
  - allow users to add custom bundles
  - protect built-in bundles from accidental removal
  - reject invalid registrations eagerly
  - remain isolated across tests (no cross-test pollution)
"""

import operator
from decimal import Decimal
from fractions import Fraction

import pytest
from prefmetric.algebra import (
    NumericOps,
    INT_OPS,
    FLOAT_OPS,
    FRACTION_OPS,
    DECIMAL_OPS,
    BUILTIN_OPS_NAMES,
    register_numeric_ops,
    get_numeric_ops,
    list_numeric_ops,
    unregister_numeric_ops,
    reset_numeric_ops_registry,
    resolve_numeric_ops,
)


@pytest.fixture(autouse=True)
def _clean_registry():
    reset_numeric_ops_registry()
    yield
    reset_numeric_ops_registry()


def _modular_ops(n):
    """Integers modulo n: a ring where every element has an inverse."""
    return NumericOps(
        add=lambda a, b: (a + b) % n,
        mul=lambda a, b: (a * b) % n,
        neg=lambda a: (-a) % n,
        zero=0,
        convert=lambda v: int(v) % n,
        name=f"mod{n}",
    )


# ── NumericOps ──────────────────────────────────────────────────────────

class TestNumericOps:

    def test_sum_starts_at_zero(self):
        assert INT_OPS.sum([]) == 0
        assert FRACTION_OPS.sum([]) == Fraction(0)

    def test_sum_folds(self):
        assert INT_OPS.sum([1, 2, 3]) == 6

    def test_subtract_via_inverse(self):
        assert INT_OPS.subtract(10, 4) == 6
        assert FLOAT_OPS.subtract(1.5, 0.5) == 1.0

    def test_custom_bundle(self):
        mod5 = _modular_ops(5)
        assert mod5.add(3, 4) == 2
        assert mod5.subtract(1, 3) == 3
        assert mod5.add(3, mod5.neg(3)) == mod5.zero

    @pytest.mark.parametrize("field", ["add", "mul", "neg", "convert"])
    def test_non_callable_rejected(self, field):
        kwargs = dict(add=operator.add, mul=operator.mul, neg=operator.neg)
        kwargs[field] = None
        with pytest.raises(TypeError, match=field):
            NumericOps(**kwargs)

    def test_default_convert_is_identity(self):
        ops = NumericOps(add=operator.add, mul=operator.mul, neg=operator.neg)
        marker = object()
        assert ops.convert(marker) is marker
        assert ops.zero == 0

    def test_frozen(self):
        with pytest.raises(Exception):
            INT_OPS.zero = 1


# ── Built-in conversions ────────────────────────────────────────────────

class TestBuiltinConversions:

    def test_int_accepts_integral_values(self):
        assert INT_OPS.convert(5) == 5
        assert INT_OPS.convert(5.0) == 5
        assert INT_OPS.convert(Fraction(10, 2)) == 5
        assert isinstance(INT_OPS.convert(5.0), int)

    def test_int_rejects_truncation(self):
        with pytest.raises(ValueError, match="non-integral"):
            INT_OPS.convert(2.5)

    def test_int_rejects_non_finite(self):
        with pytest.raises(ValueError, match="non-finite"):
            INT_OPS.convert(float("inf"))

    def test_int_rejects_bool(self):
        with pytest.raises(TypeError, match="bool"):
            INT_OPS.convert(True)

    def test_float(self):
        assert FLOAT_OPS.convert(3) == 3.0
        assert isinstance(FLOAT_OPS.convert(Fraction(1, 2)), float)

    def test_fraction_is_exact(self):
        assert FRACTION_OPS.convert(0.5) == Fraction(1, 2)
        assert FRACTION_OPS.convert(3) == Fraction(3)

    def test_decimal_from_float_uses_shortest_repr(self):
        assert DECIMAL_OPS.convert(0.1) == Decimal("0.1")

    def test_decimal_from_int_and_fraction(self):
        assert DECIMAL_OPS.convert(7) == Decimal(7)
        assert DECIMAL_OPS.convert(Fraction(1, 4)) == Decimal("0.25")

    def test_decimal_from_terminating_fraction_is_exact(self):
        assert DECIMAL_OPS.convert(Fraction(-3, 8)) == Decimal("-0.375")
        assert DECIMAL_OPS.convert(Fraction(7, 1)) == Decimal(7)
        # 60 decimal places, beyond the default 28-digit context
        tiny = Fraction(1, 2 ** 60)
        assert Fraction(DECIMAL_OPS.convert(tiny)) == tiny

    def test_decimal_rejects_non_terminating_fraction(self):
        with pytest.raises(ValueError, match="non-terminating"):
            DECIMAL_OPS.convert(Fraction(1, 3))
        with pytest.raises(ValueError, match="non-terminating"):
            DECIMAL_OPS.convert(Fraction(5, 14))


# ── Registry ────────────────────────────────────────────────────────────

class TestBuiltinRegistration:

    def test_builtins_are_registered(self):
        names = list_numeric_ops()
        for name in BUILTIN_OPS_NAMES:
            assert name in names

    def test_builtin_names_constant_is_frozen(self):
        assert isinstance(BUILTIN_OPS_NAMES, frozenset)
        assert BUILTIN_OPS_NAMES == {"int", "float", "fraction", "decimal"}

    def test_get_builtin(self):
        assert get_numeric_ops("int") is INT_OPS
        assert get_numeric_ops("decimal") is DECIMAL_OPS


class TestCustomRegistration:

    def test_register_and_get(self):
        mod7 = _modular_ops(7)
        register_numeric_ops("mod7", mod7)
        assert get_numeric_ops("mod7") is mod7
        assert "mod7" in list_numeric_ops()

    def test_duplicate_rejected(self):
        register_numeric_ops("mod7", _modular_ops(7))
        with pytest.raises(ValueError, match="already registered"):
            register_numeric_ops("mod7", _modular_ops(7))

    def test_force_overrides_builtin(self):
        mod3 = _modular_ops(3)
        register_numeric_ops("int", mod3, force=True)
        assert get_numeric_ops("int") is mod3
        reset_numeric_ops_registry()
        assert get_numeric_ops("int") is INT_OPS

    @pytest.mark.parametrize("name", ["", "   ", None, 3])
    def test_bad_name_rejected(self, name):
        with pytest.raises(ValueError, match="non-empty"):
            register_numeric_ops(name, INT_OPS)

    def test_non_bundle_rejected(self):
        with pytest.raises(TypeError, match="NumericOps"):
            register_numeric_ops("plus", operator.add)

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Available"):
            get_numeric_ops("quaternion")

    def test_list_is_snapshot(self):
        names = list_numeric_ops()
        names.append("bogus")
        assert "bogus" not in list_numeric_ops()


class TestUnregister:

    def test_unregister_custom(self):
        register_numeric_ops("mod7", _modular_ops(7))
        unregister_numeric_ops("mod7")
        assert "mod7" not in list_numeric_ops()

    def test_builtin_protected(self):
        with pytest.raises(ValueError, match="built-in"):
            unregister_numeric_ops("float")

    def test_unknown(self):
        with pytest.raises(KeyError):
            unregister_numeric_ops("nope")


class TestResolve:

    def test_bundle_passthrough(self):
        assert resolve_numeric_ops(FLOAT_OPS) is FLOAT_OPS

    def test_by_name(self):
        assert resolve_numeric_ops("fraction") is FRACTION_OPS

    def test_wrong_type(self):
        with pytest.raises(TypeError, match="NumericOps"):
            resolve_numeric_ops(42)
