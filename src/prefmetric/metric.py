"""Metric capability contract.

Any object exposing ``distance(a, b)`` is a metric as far as the rest of
prefmetric is concerned.  The contract is purely structural
(:class:`Metric` is a runtime-checkable :class:`~typing.Protocol`), so
callers never need to inherit from anything.

Preconditions (documented, never checked)
-----------------------------------------
Downstream algorithms, in particular
:class:`~prefmetric.lift.MetricLift`, assume a *proper* metric:

* non-negative: ``d(a, b) >= 0``
* identity: ``d(a, a) == 0``
* symmetric: ``d(a, b) == d(b, a)``
* deterministic: repeated calls return the same value

:func:`check_metric_axioms` is available as an opt-in diagnostic on a
finite sample.  Nothing in the core calls it.

Decorations
-----------
:class:`ClampedMetric`, :class:`ShiftedMetric` and :class:`ScaledMetric`
wrap an existing metric to bound, shift or rescale its output.  They are
the override point for composed metrics: wrap instead of subclassing.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

DistanceFunction = Callable[[Any, Any], Any]


@runtime_checkable
class Metric(Protocol):
    """Protocol for anything that measures dissimilarity of two objects."""

    def distance(self, a: Any, b: Any) -> Any:
        """Return the dissimilarity between *a* and *b*."""
        ...


@dataclass(frozen=True)
class FunctionMetric:
    """Adapt a plain two-argument callable to the :class:`Metric` protocol.

    Example::

        metric = FunctionMetric(lambda a, b: abs(a - b))
        metric.distance(2, 7)  # 5
    """

    fn: DistanceFunction

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError(
                f"Distance function must be callable, got: {type(self.fn).__name__}"
            )

    def distance(self, a: Any, b: Any) -> Any:
        return self.fn(a, b)

    def __call__(self, a: Any, b: Any) -> Any:
        return self.fn(a, b)


def as_metric(obj: Any) -> Metric:
    """Coerce *obj* into a :class:`Metric`.

    Objects that already satisfy the protocol are returned unchanged.
    Plain callables are wrapped in :class:`FunctionMetric`.

    Raises
    ------
    TypeError
        If *obj* is ``None``, has a non-callable ``distance`` attribute,
        or is neither a metric nor a callable.
    """
    if obj is None:
        raise TypeError("Metric must not be None")
    if isinstance(obj, Metric):
        if not callable(getattr(obj, "distance")):
            raise TypeError(
                f"{type(obj).__name__}.distance must be callable"
            )
        return obj
    if callable(obj):
        return FunctionMetric(obj)
    raise TypeError(
        "Metric must expose distance(a, b) or be a callable, got: "
        f"{type(obj).__name__}"
    )


# ---------------------------------------------------------------------------
# Decorations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClampedMetric:
    """Bound a metric from above: ``min(d(a, b), upper)``.

    Clamping a metric at a non-negative constant preserves all four
    metric axioms.
    """

    metric: Metric
    upper: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "metric", as_metric(self.metric))
        if self.upper < 0:
            raise ValueError(f"upper must be non-negative, got: {self.upper}")

    def distance(self, a: Any, b: Any) -> Any:
        d = self.metric.distance(a, b)
        return d if d < self.upper else self.upper


@dataclass(frozen=True)
class ShiftedMetric:
    """Shift a metric by a constant: ``d(a, b) + offset``.

    A non-zero offset breaks ``d(a, a) == 0``.  This is left to the
    caller; a negative offset can also break non-negativity.
    """

    metric: Metric
    offset: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "metric", as_metric(self.metric))

    def distance(self, a: Any, b: Any) -> Any:
        return self.metric.distance(a, b) + self.offset


@dataclass(frozen=True)
class ScaledMetric:
    """Rescale a metric: ``d(a, b) * factor`` with ``factor >= 0``."""

    metric: Metric
    factor: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "metric", as_metric(self.metric))
        if self.factor < 0:
            raise ValueError(f"factor must be non-negative, got: {self.factor}")

    def distance(self, a: Any, b: Any) -> Any:
        return self.metric.distance(a, b) * self.factor


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@dataclass
class MetricAxiomReport:
    """Axiom violations found by :func:`check_metric_axioms`.

    Each list holds the offending sample tuples.  An empty report
    (``report.ok``) means no violation was found on the sample, which is
    evidence, not proof, that the function is a metric.
    """

    negative: list[tuple[Any, Any]] = field(default_factory=list)
    non_identity: list[Any] = field(default_factory=list)
    asymmetric: list[tuple[Any, Any]] = field(default_factory=list)
    triangle: list[tuple[Any, Any, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (
            self.negative or self.non_identity or self.asymmetric or self.triangle
        )


def check_metric_axioms(
    metric: Metric | DistanceFunction,
    samples: Iterable[Any],
    *,
    tolerance: float = 0.0,
) -> MetricAxiomReport:
    """Evaluate *metric* on every ordered pair (and triple) of *samples*.

    Parameters
    ----------
    metric:
        A :class:`Metric` or plain distance callable.
    samples:
        Finite collection of objects from the metric's domain.
    tolerance:
        Slack allowed on each comparison, for floating-point metrics.

    Returns
    -------
    MetricAxiomReport
        Violations of non-negativity, identity, symmetry and the
        triangle inequality.

    Notes
    -----
    The triangle check costs ``O(n^3)`` distance calls; keep samples
    small.
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got: {tolerance}")
    m = as_metric(metric)
    items = list(samples)
    n = len(items)
    d = [[m.distance(x, y) for y in items] for x in items]

    report = MetricAxiomReport()
    for i in range(n):
        if abs(d[i][i]) > tolerance:
            report.non_identity.append(items[i])
    for i, j in itertools.product(range(n), repeat=2):
        if d[i][j] < -tolerance:
            report.negative.append((items[i], items[j]))
        if i < j and abs(d[i][j] - d[j][i]) > tolerance:
            report.asymmetric.append((items[i], items[j]))
    for i, j, k in itertools.product(range(n), repeat=3):
        if d[i][k] > d[i][j] + d[j][k] + tolerance:
            report.triangle.append((items[i], items[j], items[k]))
    return report
