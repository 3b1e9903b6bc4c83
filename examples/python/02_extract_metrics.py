"""
Example 02: Extract Metrics
===========================

Demonstrates building metrics from an extraction step, a norm and an
inherent penalty, then feeding them into the metric lift with exact
rational arithmetic.

Use case: associated objects are tracks with audio features; a track's
distance is the weighted L2 distance of its features plus a penalty
when the tracks come from different decades.
"""

from fractions import Fraction
import operator

from prefmetric import (
    ClampedMetric,
    ExtractMetric,
    MetricLift,
    check_metric_axioms,
    vector_extract_metric,
)

# ── 1. A scalar extract metric ──────────────────────────────────

print("=== 1. Scalar extract metric ===\n")

by_tempo = ExtractMetric(
    extract=lambda track: track["bpm"],
    subtract=operator.sub,
    norm=abs,
)
slow = {"bpm": 70, "decade": 1990, "features": [0.2, 0.1, 0.7]}
fast = {"bpm": 128, "decade": 2010, "features": [0.9, 0.8, 0.1]}
print(f"Tempo distance: {by_tempo.distance(slow, fast)}")

# ── 2. Vector features with an inherent penalty ────────────────

print("\n=== 2. Vector extract metric ===\n")

decade_penalty = lambda a, b: 0.0 if a["decade"] == b["decade"] else 0.5
by_features = vector_extract_metric(
    lambda track: track["features"],
    norm="euclidean",
    inherent=decade_penalty,
    weights=[1.0, 1.0, 2.0],
)
print(f"Feature distance: {by_features.distance(slow, fast):.4f}")

bounded = ClampedMetric(by_features, 1.0)
print(f"Clamped at 1.0:   {bounded.distance(slow, fast):.4f}")

report = check_metric_axioms(bounded, [slow, fast])
print(f"Axioms hold on sample: {report.ok}")

# ── 3. Lift over playlists with exact arithmetic ───────────────

print("\n=== 3. Playlist comparison ===\n")

TRACKS = {
    "t1": {"bpm": 70, "decade": 1990, "features": [0.2, 0.1, 0.7]},
    "t2": {"bpm": 90, "decade": 1990, "features": [0.3, 0.3, 0.5]},
    "t3": {"bpm": 128, "decade": 2010, "features": [0.9, 0.8, 0.1]},
}
PLAYLISTS = {
    "chill": ["t1", "t2"],
    "party": ["t3"],
    "mixed": ["t2", "t3"],
}

lift = MetricLift.from_ops(
    "fraction",
    lambda playlist: PLAYLISTS[playlist],
    operator.eq,
    lambda a, b: by_tempo.distance(TRACKS[a], TRACKS[b]),
    "chill",
    "party",
)
for pair in [("chill", "party"), ("mixed", "party"), ("party", "chill")]:
    score = lift.compare_to_preference(*pair)
    assert isinstance(score, Fraction)
    print(f"  {pair[0]:>5} -> {pair[1]:<5} score {score}")
