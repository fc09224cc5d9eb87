"""
In-process event log for swipes, matches and recomputation cycles.
"""
