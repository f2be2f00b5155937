"""
Greedy spatial declutter for POI lists.

Two points collide when they are within `min_delta` degrees on both the
latitude and the longitude axis. Degree deltas are not ground distance: at
NYC's latitude a degree of longitude is about 0.76 of a degree of latitude,
so the filter is anisotropic. This is kept as-is.
"""

from typing import Iterable, List

from poimap.models.poi import PointOfInterest


def declutter(points: Iterable[PointOfInterest], min_delta: float, cap: int) -> List[PointOfInterest]:
    """
    Keep points in received order, skipping any that collide with an
    already-kept point, until `cap` points are kept.
    """
    kept: List[PointOfInterest] = []
    if cap <= 0:
        return kept

    for candidate in points:
        if any(
            abs(candidate.lat - other.lat) < min_delta and abs(candidate.lng - other.lng) < min_delta
            for other in kept
        ):
            continue
        kept.append(candidate)
        if len(kept) >= cap:
            break
    return kept
