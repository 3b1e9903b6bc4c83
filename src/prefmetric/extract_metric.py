"""Composable metric builder: extract, subtract, norm, plus an inherent term.

A metric is assembled from four hooks and an addition::

    distance(a, b) = add(norm(subtract(extract(a), extract(b))), inherent(a, b))

* ``extract`` reduces an object to a representation living in a normed
  vector space (a statistic, a feature vector, a related quantity).
* ``subtract`` is the vector-space difference of two representations.
* ``norm`` measures that difference.
* ``inherent`` contributes any distance not captured by the extraction,
  e.g. a domain-specific penalty.
* ``add`` adds the two contributions in the chosen numeric type.

When ``norm`` satisfies the norm axioms and ``inherent`` is itself a
(pseudo)metric, the sum is a metric.  With ``inherent`` fixed at zero and
``norm(0) == 0``, ``distance(a, a) == 0`` for every ``a``.

The default composition lives in the standalone :func:`compose_distance`.
:class:`ExtractMetric` bundles the hooks and exposes
:meth:`ExtractMetric.distance`, which can be overridden in a subclass or
wrapped with the decorations in :mod:`prefmetric.metric` (clamp, shift,
scale).
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Any, Callable

from prefmetric.metric import DistanceFunction


def zero_inherent(a: Any, b: Any) -> int:
    """Inherent distance that contributes nothing."""
    return 0


def compose_distance(
    a: Any,
    b: Any,
    *,
    extract: Callable[[Any], Any],
    subtract: Callable[[Any, Any], Any],
    norm: Callable[[Any], Any],
    inherent: DistanceFunction = zero_inherent,
    add: Callable[[Any, Any], Any] = operator.add,
) -> Any:
    """Default composed distance between *a* and *b*.

    The representation of each object is extracted fresh on every call;
    nothing is cached.
    """
    return add(norm(subtract(extract(a), extract(b))), inherent(a, b))


@dataclass(frozen=True)
class ExtractMetric:
    """Metric built from extraction, subtraction, norm and inherent hooks.

    Parameters
    ----------
    extract:
        Pure, deterministic map from an object to its representation.
    subtract:
        ``subtract(sa, sb)`` must be true vector-space subtraction
        ``sa - sb``.
    norm:
        Non-negative norm on representations.
    inherent:
        Extraction-independent distance term.  Defaults to
        :func:`zero_inherent`.
    add:
        Addition on the result type.  Defaults to ``operator.add``.

    Example::

        by_length = ExtractMetric(
            extract=len,
            subtract=operator.sub,
            norm=abs,
        )
        by_length.distance("abc", "a")  # 2

    Raises
    ------
    TypeError
        If any hook is not callable.
    """

    extract: Callable[[Any], Any]
    subtract: Callable[[Any, Any], Any]
    norm: Callable[[Any], Any]
    inherent: DistanceFunction = zero_inherent
    add: Callable[[Any, Any], Any] = operator.add

    def __post_init__(self) -> None:
        for label in ("extract", "subtract", "norm", "inherent", "add"):
            fn = getattr(self, label)
            if not callable(fn):
                raise TypeError(
                    f"ExtractMetric.{label} must be callable, got: {type(fn).__name__}"
                )

    def default_distance(self, a: Any, b: Any) -> Any:
        """The composed distance, see :func:`compose_distance`."""
        return compose_distance(
            a,
            b,
            extract=self.extract,
            subtract=self.subtract,
            norm=self.norm,
            inherent=self.inherent,
            add=self.add,
        )

    def distance(self, a: Any, b: Any) -> Any:
        """Distance between *a* and *b*.

        Delegates to :meth:`default_distance`.  Subclasses may override
        this to bound, shift or rescale the default.
        """
        return self.default_distance(a, b)

    def __call__(self, a: Any, b: Any) -> Any:
        return self.distance(a, b)
