"""
Map free-text component references from the LLM onto catalog entries.
"""

from __future__ import annotations

from typing import Optional, Sequence

from infraai.models import SystemComponent


def resolve_component(
    ref: str,
    catalog: Sequence[SystemComponent],
) -> Optional[SystemComponent]:
    """
    Find the catalog entry a reference points at. Returns None if nothing matches.

    Exact passes, first hit wins:
    1. id (case-sensitive)
    2. name (case-sensitive)
    3. name (case-insensitive)

    Then a fuzzy pass over names that contain the reference or are contained
    in it. The candidate whose name length is closest to the reference wins;
    for a substring relation that difference is the edit distance. Ties go
    to catalog order.
    """
    if not isinstance(ref, str) or not ref.strip():
        return None

    for component in catalog:
        if component.id == ref:
            return component

    for component in catalog:
        if component.name == ref:
            return component

    lowered = ref.lower()
    for component in catalog:
        if component.name.lower() == lowered:
            return component

    best: Optional[SystemComponent] = None
    best_distance = 0
    for component in catalog:
        name = component.name.lower()
        if lowered in name or name in lowered:
            distance = abs(len(name) - len(lowered))
            if best is None or distance < best_distance:
                best = component
                best_distance = distance

    return best
