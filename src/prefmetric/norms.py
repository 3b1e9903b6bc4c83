"""Norm registry and vector-valued extract metrics.

Ships with three built-in norms on numeric vectors (euclidean,
manhattan, chebyshev), the Lp family most feature extractors need.
Custom norms can be registered at runtime.

Built-in norms are protected from accidental removal but can be
intentionally overridden via ``force=True``.

:func:`vector_extract_metric` builds an
:class:`~prefmetric.extract_metric.ExtractMetric` whose extracted
representation is a one-dimensional ``numpy`` float array, so callers
only need to supply the extraction step.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from prefmetric.extract_metric import ExtractMetric, zero_inherent
from prefmetric.metric import DistanceFunction

logger = logging.getLogger(__name__)

NormFunction = Callable[[np.ndarray], float]

DEFAULT_NORM = "euclidean"


# ---------------------------------------------------------------------------
# Shared input validation
# ---------------------------------------------------------------------------


def _as_vector(x: Any) -> np.ndarray:
    """Coerce *x* into a finite one-dimensional float array.

    Raises
    ------
    ValueError
        If *x* is not one-dimensional or holds NaN / infinite entries.
    TypeError
        If *x* holds non-numeric entries.
    """
    try:
        v = np.asarray(x, dtype=float)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"Vector must hold numbers: {exc}") from None
    if v.ndim != 1:
        raise ValueError(f"Vector must be one-dimensional, got shape {v.shape}")
    if not np.all(np.isfinite(v)):
        raise ValueError("Vector entries must be finite")
    return v


# ---------------------------------------------------------------------------
# Built-in norms
# ---------------------------------------------------------------------------


def euclidean_norm(x: Any) -> float:
    """L2 norm ``sqrt(sum(x_i^2))``.  The empty vector has norm 0.0."""
    v = _as_vector(x)
    return float(np.linalg.norm(v, ord=2)) if v.size else 0.0


def manhattan_norm(x: Any) -> float:
    """L1 norm ``sum(|x_i|)``.  The empty vector has norm 0.0."""
    v = _as_vector(x)
    return float(np.linalg.norm(v, ord=1)) if v.size else 0.0


def chebyshev_norm(x: Any) -> float:
    """L-infinity norm ``max(|x_i|)``.  The empty vector has norm 0.0."""
    v = _as_vector(x)
    return float(np.linalg.norm(v, ord=np.inf)) if v.size else 0.0


_BUILTIN_NORMS: dict[str, NormFunction] = {
    "euclidean": euclidean_norm,
    "manhattan": manhattan_norm,
    "chebyshev": chebyshev_norm,
}

BUILTIN_NORM_NAMES: frozenset[str] = frozenset(_BUILTIN_NORMS)

_registry: dict[str, NormFunction] = dict(_BUILTIN_NORMS)


# ---------------------------------------------------------------------------
# Public registry API
# ---------------------------------------------------------------------------


def register_norm(name: str, fn: NormFunction, *, force: bool = False) -> None:
    """Register a norm under *name*.

    Raises
    ------
    ValueError
        If *name* is empty/whitespace or already registered without
        *force*.
    TypeError
        If *fn* is not callable.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Norm name must be a non-empty string, got: {name!r}")
    if not callable(fn):
        raise TypeError(f"Norm must be callable, got: {type(fn).__name__}")
    if not force and name in _registry:
        raise ValueError(
            f"Norm '{name}' is already registered. Pass force=True to override."
        )
    if name in BUILTIN_NORM_NAMES:
        logger.info("Overriding built-in norm %r", name)
    _registry[name] = fn


def get_norm(name: str) -> NormFunction:
    """Return the norm registered under *name*.

    Raises
    ------
    KeyError
        If no norm is registered with that name.
    """
    try:
        return _registry[name]
    except KeyError:
        raise KeyError(
            f"No norm registered as '{name}'. Available: {sorted(_registry)}"
        ) from None


def list_norms() -> list[str]:
    """Return a sorted snapshot of all registered norm names."""
    return sorted(_registry)


def unregister_norm(name: str) -> None:
    """Remove a **custom** norm from the registry.

    Raises
    ------
    KeyError
        If *name* is not registered.
    ValueError
        If *name* is a built-in norm.
    """
    if name in BUILTIN_NORM_NAMES:
        raise ValueError(
            f"Cannot unregister built-in norm '{name}'. "
            "Use register_norm(..., force=True) to override."
        )
    if name not in _registry:
        raise KeyError(f"Norm '{name}' is not registered")
    del _registry[name]


def reset_norm_registry() -> None:
    """Restore the registry to its initial state (built-ins only)."""
    _registry.clear()
    _registry.update(_BUILTIN_NORMS)


# ---------------------------------------------------------------------------
# Vector extract metrics
# ---------------------------------------------------------------------------


def vector_difference(a: Any, b: Any) -> np.ndarray:
    """Elementwise ``a - b`` of two equal-length numeric vectors.

    Raises
    ------
    ValueError
        On dimension mismatch or non-finite entries.
    """
    va = _as_vector(a)
    vb = _as_vector(b)
    if va.shape != vb.shape:
        raise ValueError(f"Vector dimension mismatch: {va.size} vs {vb.size}")
    return va - vb


def vector_extract_metric(
    extract: Callable[[Any], Sequence[float]],
    *,
    norm: Union[str, NormFunction] = DEFAULT_NORM,
    inherent: DistanceFunction = zero_inherent,
    weights: Optional[Sequence[float]] = None,
) -> ExtractMetric:
    """Build an :class:`ExtractMetric` over numeric feature vectors.

    Parameters
    ----------
    extract:
        Maps an object to a sequence of floats.  All objects compared by
        the same metric must yield vectors of the same length.
    norm:
        Registered norm name or a norm callable.
    inherent:
        Extraction-independent distance term.
    weights:
        Optional non-negative per-coordinate weights applied to the
        difference before the norm.  Zero weights ignore a coordinate,
        which makes the result a pseudometric.

    Raises
    ------
    KeyError
        If *norm* names an unregistered norm.
    TypeError
        If *extract*, *norm* or *inherent* is not callable.
    ValueError
        If *weights* contains negative or non-finite entries.
    """
    norm_fn = get_norm(norm) if isinstance(norm, str) else norm
    if not callable(norm_fn):
        raise TypeError(f"Norm must be callable, got: {type(norm_fn).__name__}")

    subtract: Callable[[Any, Any], np.ndarray] = vector_difference
    if weights is not None:
        w = _as_vector(weights)
        if np.any(w < 0):
            raise ValueError("Weights must be non-negative")

        def weighted_difference(a: Any, b: Any) -> np.ndarray:
            diff = vector_difference(a, b)
            if diff.shape != w.shape:
                raise ValueError(
                    f"Weight dimension mismatch: {w.size} weights for "
                    f"{diff.size}-dimensional vectors"
                )
            return diff * w

        subtract = weighted_difference

    return ExtractMetric(
        extract=extract,
        subtract=subtract,
        norm=norm_fn,
        inherent=inherent,
    )
