"""
Example 01: Genre Preferences
=============================

Demonstrates how to calibrate film-to-film transitions against one
preferred transition using the metric lift.

Use case: a viewer who enjoyed going from "Heat" to "Collateral" wants
the next recommendation to feel like the same kind of step.
"""

import operator

from prefmetric import MetricLift

# ── 1. The catalog (supplied by the host application) ───────────

GENRES = {
    "Heat": {"crime", "thriller", "drama"},
    "Collateral": {"crime", "thriller"},
    "Drive": {"crime", "drama"},
    "Amelie": {"romance", "comedy"},
    "Se7en": {"crime", "thriller", "mystery"},
    "Untitled": set(),
}

# A hand-made distance between genres: 0 for the same genre, 1 for
# neighbouring genres, 2 otherwise.
NEIGHBOURS = {
    frozenset({"crime", "thriller"}),
    frozenset({"crime", "drama"}),
    frozenset({"thriller", "mystery"}),
    frozenset({"romance", "comedy"}),
}


def genre_distance(a: str, b: str) -> int:
    if a == b:
        return 0
    return 1 if frozenset({a, b}) in NEIGHBOURS else 2


# ── 2. Build the lift around the preferred transition ──────────

print("=== 1. Reference transition ===\n")

lift = MetricLift(
    operator.add,
    operator.mul,
    operator.neg,
    GENRES.__getitem__,
    operator.eq,
    genre_distance,
    "Heat",
    "Collateral",
)
print(f"Reference: {lift.reference_from} -> {lift.reference_to}")
print(f"Preference vector has {len(lift.preference_vector)} entries")
print(f"Reference norm-squared: {lift.reference_norm_squared}")

# ── 3. Compare candidate transitions ───────────────────────────

print("\n=== 2. Candidate transitions ===\n")

candidates = [
    ("Heat", "Collateral"),
    ("Heat", "Se7en"),
    ("Drive", "Collateral"),
    ("Heat", "Amelie"),
    ("Heat", "Untitled"),
]
for c, d in candidates:
    print(f"  {c:>6} -> {d:<10} score {lift.compare_to_preference(c, d)}")
# The reference itself scores 0; a film without genres scores the full
# reference norm-squared.

# ── 4. Rank the catalog ────────────────────────────────────────

print("\n=== 3. Next film after Heat ===\n")

ranking = lift.rank(("Heat", film) for film in GENRES if film != "Heat")
for (_, film), score in ranking:
    print(f"  {film:<10} {score}")
