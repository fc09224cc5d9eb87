"""
Recommendation recomputation pipeline.

Responsibilities:
- Decide from profile changes whether a user's set must be rebuilt.
- Pull candidates by proximity or by recency, excluding swiped profiles.
- Rewrite the user's set atomically and track the in-progress flag.
- Replenish a set that has been consumed down to the low-water mark.
"""
