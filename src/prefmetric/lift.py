"""Metric lift: calibrated comparison of object pairs against a preference.

Given a metric on *associated objects* (e.g. the genre tags of a film),
:class:`MetricLift` turns it into a scalar comparison between arbitrary
ordered pairs of *primary objects* (the films), measured relative to one
fixed reference pair chosen at construction.

Algorithm
---------
For an ordered pair ``(A, B)`` the *indexed distance vector* has one
entry per pair of associated objects::

    v(A, B)[(x, y)] = metric.distance(x, y)   for x in assoc(A), y in assoc(B)

At construction the reference vector ``p = v(From, To)`` and its
norm-squared ``<p, p>`` are computed once.  A query then returns::

    compare_to_preference(C, D) = <p, p> - <p, v(C, D)>

where the inner product aligns dimensions by the caller's equality
predicate (componentwise on both sides of the key) and unmatched
entries contribute nothing.  Subtraction is expressed as
``addition(<p, p>, inverse(<p, v>))`` since only addition and an
additive inverse are assumed on the numeric type.

Consequences worth knowing:

* ``compare_to_preference(From, To)`` is exactly ``zero`` with exact
  arithmetic.
* An empty associated set on either side gives an empty vector, so the
  result is ``<p, p>`` unchanged.
* Equal distance *values* under different associated objects do not
  align.  With ``assoc(x) = {x}`` and ``d = |a - b|`` on integers and the
  reference ``(0, 5)``, the pair ``(1, 6)`` scores 25, not 0.

Non-negativity
--------------
The result is non-negative when matched keys carry equal metric values
(a deterministic metric and an equality predicate consistent with it)
and squares are non-negative in the numeric type.  These are
preconditions on the caller's functions; nothing here verifies them.

Alignment cost
--------------
The general alignment is a linear scan per reference entry:
``O(|p| * |v|)`` predicate calls.  When a hashable canonical ``key`` is
supplied (``are_equal(x, y)`` iff ``key(x) == key(y)``), a dict join is
used instead, at near-linear cost, with identical results.
Building a vector without a key also scans its own entries for
repeated keys, so construction costs ``O(|v|^2)`` predicate calls.

Repeated associated objects collapse: a vector holds one entry per
distinct key (under the predicate, or the canonical key), and a later
distance for the same key overwrites the earlier one in place.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable, Iterator, Optional

from prefmetric.algebra import NumericOps, _identity, resolve_numeric_ops
from prefmetric.metric import DistanceFunction, Metric, as_metric

logger = logging.getLogger(__name__)

AssociationFunction = Callable[[Any], Iterable[Any]]
EqualityPredicate = Callable[[Any, Any], bool]
KeyFunction = Callable[[Any], Hashable]

_MISSING = object()


def _require_callable(value: Any, label: str) -> None:
    if not callable(value):
        raise TypeError(
            f"{label} must be callable, got: {type(value).__name__}"
        )


@dataclass(frozen=True)
class IndexedDistanceVector:
    """Sparse vector of distances indexed by ordered associated-object pairs.

    Entries keep the iteration order of the association function.  Keys
    are never hashed: lookups go through an equality predicate supplied
    at alignment time.
    """

    entries: tuple[tuple[tuple[Any, Any], Any], ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[tuple[Any, Any], Any]]:
        return iter(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def keys(self) -> list[tuple[Any, Any]]:
        return [k for k, _ in self.entries]

    def values(self) -> list[Any]:
        return [v for _, v in self.entries]

    def lookup(
        self,
        key: tuple[Any, Any],
        are_equal: EqualityPredicate,
        default: Any = None,
    ) -> Any:
        """Value of the first entry whose key matches *key*, else *default*."""
        x, y = key
        for (kx, ky), value in self.entries:
            if are_equal(kx, x) and are_equal(ky, y):
                return value
        return default


def index_distances(
    a: Any,
    b: Any,
    associated: AssociationFunction,
    metric: Metric,
    are_equal: EqualityPredicate = operator.eq,
    key: Optional[KeyFunction] = None,
) -> IndexedDistanceVector:
    """Distances between every associated object of *a* and of *b*.

    The association function is called afresh for both sides; its
    results are materialised once so that one-shot iterators work.

    Pairs that repeat an earlier key (componentwise under *are_equal*,
    or by ``(key(x), key(y))`` when *key* is given) do not add a new
    entry.  The later distance replaces the earlier value and the entry
    keeps its first position.
    """
    from_side = list(associated(a))
    to_side = list(associated(b))
    entries: list[tuple[tuple[Any, Any], Any]] = []
    slots: dict[tuple[Hashable, Hashable], int] = {}
    for x in from_side:
        for y in to_side:
            value = metric.distance(x, y)
            if key is not None:
                slot = slots.setdefault((key(x), key(y)), len(entries))
            else:
                slot = next(
                    (
                        i
                        for i, ((kx, ky), _) in enumerate(entries)
                        if are_equal(kx, x) and are_equal(ky, y)
                    ),
                    len(entries),
                )
            if slot == len(entries):
                entries.append(((x, y), value))
            else:
                entries[slot] = (entries[slot][0], value)
    return IndexedDistanceVector(tuple(entries))


class MetricLift:
    """Compare ordered pairs of objects to a fixed preference pair.

    Parameters
    ----------
    addition:
        Associative, commutative addition on the accumulation type.
    multiplication:
        Multiplication distributing over *addition*.
    inverse:
        Additive inverse: ``addition(x, inverse(x)) == zero``.
    associated:
        Maps a primary object to its associated objects.  Called on
        every query; results are not cached.
    are_equal:
        Equality predicate on associated objects, used to align vector
        dimensions.
    metric:
        Metric on associated objects: a :class:`~prefmetric.metric.Metric`
        or a plain ``(x, y) -> distance`` callable.
    reference_from, reference_to:
        The reference (preference) ordered pair.
    zero:
        Neutral element of *addition*.  Defaults to ``0``.
    convert:
        Maps metric results into the accumulation type before
        multiplication.  Defaults to the identity.
    key:
        Optional canonical key on associated objects, hashable and
        consistent with *are_equal*.  Enables the dict-join alignment.

    Raises
    ------
    TypeError
        If any supplied function is missing or not callable.

    Example::

        lift = MetricLift(
            operator.add, operator.mul, operator.neg,
            associated=lambda x: {x},
            are_equal=operator.eq,
            metric=lambda a, b: abs(a - b),
            reference_from=0,
            reference_to=5,
        )
        lift.compare_to_preference(0, 5)  # 0
        lift.compare_to_preference(1, 6)  # 25
    """

    __slots__ = (
        "_addition",
        "_multiplication",
        "_inverse",
        "_associated",
        "_are_equal",
        "_metric",
        "_zero",
        "_convert",
        "_key",
        "_reference_from",
        "_reference_to",
        "_prf",
        "_prf_norm_squared",
    )

    def __init__(
        self,
        addition: Callable[[Any, Any], Any],
        multiplication: Callable[[Any, Any], Any],
        inverse: Callable[[Any], Any],
        associated: AssociationFunction,
        are_equal: EqualityPredicate,
        metric: Metric | DistanceFunction,
        reference_from: Any,
        reference_to: Any,
        *,
        zero: Any = 0,
        convert: Callable[[Any], Any] = _identity,
        key: Optional[KeyFunction] = None,
    ) -> None:
        _require_callable(addition, "addition")
        _require_callable(multiplication, "multiplication")
        _require_callable(inverse, "inverse")
        _require_callable(associated, "associated")
        _require_callable(are_equal, "are_equal")
        _require_callable(convert, "convert")
        if key is not None:
            _require_callable(key, "key")

        self._addition = addition
        self._multiplication = multiplication
        self._inverse = inverse
        self._associated = associated
        self._are_equal = are_equal
        self._metric = as_metric(metric)
        self._zero = zero
        self._convert = convert
        self._key = key
        self._reference_from = reference_from
        self._reference_to = reference_to

        self._prf = self.indexed_distances(reference_from, reference_to)
        self._prf_norm_squared = self.inner_product_with_preference(self._prf)
        logger.debug(
            "Preference vector for (%r, %r) has %d entries",
            reference_from, reference_to, len(self._prf),
        )

    @classmethod
    def from_ops(
        cls,
        ops: NumericOps | str,
        associated: AssociationFunction,
        are_equal: EqualityPredicate,
        metric: Metric | DistanceFunction,
        reference_from: Any,
        reference_to: Any,
        *,
        key: Optional[KeyFunction] = None,
    ) -> "MetricLift":
        """Build a lift from a :class:`~prefmetric.algebra.NumericOps` bundle.

        *ops* may also be the name of a registered bundle, e.g.
        ``"fraction"``.
        """
        bundle = resolve_numeric_ops(ops)
        return cls(
            bundle.add,
            bundle.mul,
            bundle.neg,
            associated,
            are_equal,
            metric,
            reference_from,
            reference_to,
            zero=bundle.zero,
            convert=bundle.convert,
            key=key,
        )

    # ── Read-only state ───────────────────────────────────────────

    @property
    def reference_from(self) -> Any:
        return self._reference_from

    @property
    def reference_to(self) -> Any:
        return self._reference_to

    @property
    def preference_vector(self) -> IndexedDistanceVector:
        return self._prf

    @property
    def reference_norm_squared(self) -> Any:
        return self._prf_norm_squared

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(reference_from={self._reference_from!r}, "
            f"reference_to={self._reference_to!r}, dimension={len(self._prf)})"
        )

    # ── Core algorithm ────────────────────────────────────────────

    def indexed_distances(self, a: Any, b: Any) -> IndexedDistanceVector:
        """Indexed distance vector of the ordered pair ``(a, b)``."""
        return index_distances(
            a, b, self._associated, self._metric, self._are_equal, self._key
        )

    def inner_product_with_preference(self, vector: IndexedDistanceVector) -> Any:
        """Inner product of *vector* with the preference vector.

        Dimensions are aligned by the equality predicate (or by the
        canonical key when one was given).  Reference entries without a
        match contribute nothing; the empty sum is ``zero``.
        """
        if self._key is not None:
            return self._keyed_inner_product(vector)
        total = self._zero
        for ref_key, ref_value in self._prf:
            value = vector.lookup(ref_key, self._are_equal, _MISSING)
            if value is not _MISSING:
                total = self._accumulate(total, ref_value, value)
        return total

    def _keyed_inner_product(self, vector: IndexedDistanceVector) -> Any:
        key = self._key
        index: dict[tuple[Hashable, Hashable], Any] = {}
        for (x, y), value in vector:
            index.setdefault((key(x), key(y)), value)
        total = self._zero
        for (x, y), ref_value in self._prf:
            value = index.get((key(x), key(y)), _MISSING)
            if value is not _MISSING:
                total = self._accumulate(total, ref_value, value)
        return total

    def _accumulate(self, total: Any, ref_value: Any, value: Any) -> Any:
        product = self._multiplication(
            self._convert(ref_value), self._convert(value)
        )
        return self._addition(total, product)

    def compare_to_preference(self, c: Any, d: Any) -> Any:
        """Distance of the ordered pair ``(c, d)`` from the preference.

        Returns ``<p, p> - <p, v(c, d)>`` computed as
        ``addition(<p, p>, inverse(<p, v(c, d)>))``.
        """
        vector = self.indexed_distances(c, d)
        inner = self.inner_product_with_preference(vector)
        logger.debug("Compared (%r, %r): %d entries", c, d, len(vector))
        return self._addition(self._prf_norm_squared, self._inverse(inner))

    compare_to_prf = compare_to_preference

    def rank(self, pairs: Iterable[tuple[Any, Any]]) -> list[tuple[tuple[Any, Any], Any]]:
        """Score *pairs* and sort them closest-to-preference first.

        Returns ``[((c, d), score), ...]`` in ascending score order.
        Ties keep input order.  Requires scores to be mutually
        comparable with ``<``.
        """
        scored = [((c, d), self.compare_to_preference(c, d)) for c, d in pairs]
        scored.sort(key=lambda item: item[1])
        return scored
