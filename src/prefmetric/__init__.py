"""
prefmetric: composable metrics and preference-calibrated pair comparison

Algebraic building blocks for recommendation scores: a metric
capability contract, an "extract + norm + inherent distance" metric
builder, and the metric lift that compares arbitrary object pairs to a
fixed preference pair.
"""

import logging

__version__ = "0.3.0"

from prefmetric.metric import (
    Metric,
    FunctionMetric,
    as_metric,
    ClampedMetric,
    ShiftedMetric,
    ScaledMetric,
    MetricAxiomReport,
    check_metric_axioms,
)
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
from prefmetric.extract_metric import (
    ExtractMetric,
    compose_distance,
    zero_inherent,
)
from prefmetric.norms import (
    DEFAULT_NORM,
    BUILTIN_NORM_NAMES,
    euclidean_norm,
    manhattan_norm,
    chebyshev_norm,
    register_norm,
    get_norm,
    list_norms,
    unregister_norm,
    reset_norm_registry,
    vector_difference,
    vector_extract_metric,
)
from prefmetric.lift import (
    IndexedDistanceVector,
    MetricLift,
    index_distances,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Metric capability
    "Metric",
    "FunctionMetric",
    "as_metric",
    "ClampedMetric",
    "ShiftedMetric",
    "ScaledMetric",
    "MetricAxiomReport",
    "check_metric_axioms",
    # Numeric operations
    "NumericOps",
    "INT_OPS",
    "FLOAT_OPS",
    "FRACTION_OPS",
    "DECIMAL_OPS",
    "BUILTIN_OPS_NAMES",
    "register_numeric_ops",
    "get_numeric_ops",
    "list_numeric_ops",
    "unregister_numeric_ops",
    "reset_numeric_ops_registry",
    "resolve_numeric_ops",
    # Composable metric builder
    "ExtractMetric",
    "compose_distance",
    "zero_inherent",
    # Norms
    "DEFAULT_NORM",
    "BUILTIN_NORM_NAMES",
    "euclidean_norm",
    "manhattan_norm",
    "chebyshev_norm",
    "register_norm",
    "get_norm",
    "list_norms",
    "unregister_norm",
    "reset_norm_registry",
    "vector_difference",
    "vector_extract_metric",
    # Metric lift
    "IndexedDistanceVector",
    "MetricLift",
    "index_distances",
]
