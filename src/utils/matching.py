"""
One-directional structural matching for trigger predicates.

deep_match(pattern, candidate) is NOT symmetric: every property present in
the pattern must exist in the candidate with an equal (or recursively
matching) value, while extra properties in the candidate are ignored.

    deep_match({"a": 1}, {"a": 1, "b": 2})  -> True
    deep_match({"a": 1, "b": 2}, {"a": 1})  -> False
"""

from typing import Any


def deep_match(pattern: Any, candidate: Any) -> bool:
    if isinstance(pattern, dict):
        if not isinstance(candidate, dict):
            return False
        for key, expected in pattern.items():
            if key not in candidate:
                return False
            if not deep_match(expected, candidate[key]):
                return False
        return True

    if isinstance(pattern, (list, tuple)):
        if not isinstance(candidate, (list, tuple)) or len(pattern) > len(candidate):
            return False
        return all(deep_match(p, c) for p, c in zip(pattern, candidate))

    # bool is an int subclass; keep True from matching 1
    if isinstance(pattern, bool) or isinstance(candidate, bool):
        return type(pattern) is type(candidate) and pattern == candidate

    return pattern == candidate
