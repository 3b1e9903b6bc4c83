"""Numeric operation bundles for generic accumulation.

:class:`~prefmetric.lift.MetricLift` never touches ``+`` or ``*``
directly.  It accumulates through an explicit bundle of operations so
that callers can pick any numeric representation: machine integers,
floats, exact rationals, fixed-point decimals, or their own types.

Laws (documented preconditions, never checked)
----------------------------------------------
* ``add`` is associative and commutative with neutral element ``zero``
* ``neg`` is the additive inverse: ``add(x, neg(x)) == zero``
* ``mul`` distributes over ``add``
* ``convert`` maps a metric result into the accumulation type without
  losing the precision the caller relies on

A bundle that breaks these laws silently produces meaningless scores.

Registry
--------
Built-in bundles are registered under ``"int"``, ``"float"``,
``"fraction"`` and ``"decimal"``.  Users can add bundles at runtime via
:func:`register_numeric_ops`.  Built-ins are protected from removal but
can be overridden with ``force=True``.
"""

from __future__ import annotations

import logging
import math
import operator
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from functools import reduce
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)

BinaryOp = Callable[[Any, Any], Any]
UnaryOp = Callable[[Any], Any]


def _identity(x: Any) -> Any:
    return x


@dataclass(frozen=True)
class NumericOps:
    """Addition, multiplication and additive inverse over one numeric type.

    Parameters
    ----------
    add:
        Binary addition.
    mul:
        Binary multiplication.
    neg:
        Unary additive inverse.
    zero:
        Neutral element of ``add``.
    convert:
        Maps a metric result into this bundle's type.  Defaults to the
        identity.
    name:
        Optional label, used in ``repr`` and error messages.
    """

    add: BinaryOp
    mul: BinaryOp
    neg: UnaryOp
    zero: Any = 0
    convert: UnaryOp = _identity
    name: Optional[str] = None

    def __post_init__(self) -> None:
        for label in ("add", "mul", "neg", "convert"):
            fn = getattr(self, label)
            if not callable(fn):
                raise TypeError(
                    f"NumericOps.{label} must be callable, got: {type(fn).__name__}"
                )

    def sum(self, values: Iterable[Any]) -> Any:
        """Fold *values* with ``add``, starting at ``zero``."""
        return reduce(self.add, values, self.zero)

    def subtract(self, a: Any, b: Any) -> Any:
        """``a - b`` expressed as ``add(a, neg(b))``."""
        return self.add(a, self.neg(b))


# ---------------------------------------------------------------------------
# Conversions for the built-in bundles
# ---------------------------------------------------------------------------


def _to_int(value: Any) -> int:
    """Convert to ``int``, refusing to truncate non-integral values."""
    if isinstance(value, bool):
        raise TypeError("Cannot accumulate bool as int")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Cannot convert non-finite value to int: {value}")
    as_int = int(value)
    if as_int != value:
        raise ValueError(f"Cannot convert non-integral value to int: {value!r}")
    return as_int


def _to_float(value: Any) -> float:
    return float(value)


def _to_fraction(value: Any) -> Fraction:
    if isinstance(value, Fraction):
        return value
    return Fraction(value)


def _fraction_to_decimal(value: Fraction) -> Decimal:
    """Exact decimal form of *value*, refusing non-terminating fractions."""
    rest = value.denominator
    twos = fives = 0
    while rest % 2 == 0:
        rest //= 2
        twos += 1
    while rest % 5 == 0:
        rest //= 5
        fives += 1
    if rest != 1:
        raise ValueError(
            f"Cannot convert non-terminating fraction to Decimal exactly: {value}"
        )
    places = max(twos, fives)
    digits = value.numerator * 2 ** (places - twos) * 5 ** (places - fives)
    # string construction is exact; arithmetic would round to context precision
    return Decimal(f"{digits}E-{places}")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr round-trips the shortest decimal form of the float
        return Decimal(repr(value))
    if isinstance(value, Fraction):
        return _fraction_to_decimal(value)
    return Decimal(value)


# ---------------------------------------------------------------------------
# Built-in bundles
# ---------------------------------------------------------------------------

INT_OPS = NumericOps(
    add=operator.add, mul=operator.mul, neg=operator.neg,
    zero=0, convert=_to_int, name="int",
)
FLOAT_OPS = NumericOps(
    add=operator.add, mul=operator.mul, neg=operator.neg,
    zero=0.0, convert=_to_float, name="float",
)
FRACTION_OPS = NumericOps(
    add=operator.add, mul=operator.mul, neg=operator.neg,
    zero=Fraction(0), convert=_to_fraction, name="fraction",
)
DECIMAL_OPS = NumericOps(
    add=operator.add, mul=operator.mul, neg=operator.neg,
    zero=Decimal(0), convert=_to_decimal, name="decimal",
)

_BUILTIN_OPS: dict[str, NumericOps] = {
    "int": INT_OPS,
    "float": FLOAT_OPS,
    "fraction": FRACTION_OPS,
    "decimal": DECIMAL_OPS,
}

BUILTIN_OPS_NAMES: frozenset[str] = frozenset(_BUILTIN_OPS)

_registry: dict[str, NumericOps] = dict(_BUILTIN_OPS)


# ---------------------------------------------------------------------------
# Public registry API
# ---------------------------------------------------------------------------


def register_numeric_ops(
    name: str,
    ops: NumericOps,
    *,
    force: bool = False,
) -> None:
    """Register a numeric operation bundle under *name*.

    Raises
    ------
    ValueError
        If *name* is empty/whitespace or already registered without
        *force*.
    TypeError
        If *ops* is not a :class:`NumericOps`.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError(
            f"Numeric ops name must be a non-empty string, got: {name!r}"
        )
    if not isinstance(ops, NumericOps):
        raise TypeError(
            f"Expected NumericOps, got: {type(ops).__name__}"
        )
    if not force and name in _registry:
        raise ValueError(
            f"Numeric ops '{name}' are already registered. "
            "Pass force=True to override."
        )
    if name in BUILTIN_OPS_NAMES:
        logger.info("Overriding built-in numeric ops %r", name)
    _registry[name] = ops


def get_numeric_ops(name: str) -> NumericOps:
    """Return the bundle registered under *name*.

    Raises
    ------
    KeyError
        If nothing is registered under *name*.
    """
    try:
        return _registry[name]
    except KeyError:
        raise KeyError(
            f"No numeric ops registered as '{name}'. "
            f"Available: {sorted(_registry)}"
        ) from None


def list_numeric_ops() -> list[str]:
    """Return a sorted snapshot of all registered bundle names."""
    return sorted(_registry)


def unregister_numeric_ops(name: str) -> None:
    """Remove a **custom** bundle from the registry.

    Raises
    ------
    KeyError
        If *name* is not registered.
    ValueError
        If *name* is a built-in bundle.
    """
    if name in BUILTIN_OPS_NAMES:
        raise ValueError(
            f"Cannot unregister built-in numeric ops '{name}'. "
            "Use register_numeric_ops(..., force=True) to override."
        )
    if name not in _registry:
        raise KeyError(f"Numeric ops '{name}' are not registered")
    del _registry[name]


def reset_numeric_ops_registry() -> None:
    """Restore the registry to the built-in bundles only."""
    _registry.clear()
    _registry.update(_BUILTIN_OPS)


def resolve_numeric_ops(ops: NumericOps | str) -> NumericOps:
    """Accept either a bundle or the name of a registered bundle."""
    if isinstance(ops, NumericOps):
        return ops
    if isinstance(ops, str):
        return get_numeric_ops(ops)
    raise TypeError(
        f"Expected NumericOps or a registered name, got: {type(ops).__name__}"
    )
