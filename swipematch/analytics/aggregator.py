from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    swipes = [e for e in events if e["type"] == "swipe"]
    matches = [e for e in events if e["type"] == "match"]
    cycles = [e for e in events if e["type"] == "recompute"]

    # Swipe mix
    type_counter: Counter[str] = Counter(s.get("swipe_type", "unknown") for s in swipes)
    positive = type_counter["like"] + type_counter["superlike"]
    total_swipes = len(swipes)

    # Recompute cycles
    succeeded = [c for c in cycles if c.get("success")]
    sizes = [c["size"] for c in succeeded if "size" in c]
    times = [c["elapsed_ms"] for c in cycles if "elapsed_ms" in c]
    strategy_counter: Counter[str] = Counter(c.get("strategy", "unknown") for c in cycles)

    # Most active swipers
    author_counter: Counter[str] = Counter(s.get("author_id", "unknown") for s in swipes)
    top_swipers = [{"user_id": u, "count": c} for u, c in author_counter.most_common(10)]

    return {
        "total_swipes": total_swipes,
        "swipes_by_type": dict(type_counter),
        "like_rate": round(positive / total_swipes * 100, 1) if total_swipes else 0.0,
        "total_matches": len(matches),
        "match_rate": round(len(matches) / positive * 100, 1) if positive else 0.0,
        "top_swipers": top_swipers,
        "recompute_stats": {
            "cycles": len(cycles),
            "failed": len(cycles) - len(succeeded),
            "avg_size": round(sum(sizes) / len(sizes), 1) if sizes else 0.0,
            "avg_elapsed_ms": round(sum(times) / len(times), 1) if times else 0.0,
            "by_strategy": dict(strategy_counter),
        },
    }
