# huntbot/services/contest/geo.py
from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(
    lat1: float | None,
    lng1: float | None,
    lat2: float | None,
    lng2: float | None,
) -> float:
    """
    Great-circle distance in km. Any missing coordinate -> math.inf,
    which never passes a "within" check and always counts as movement.
    """
    if lat1 is None or lng1 is None or lat2 is None or lng2 is None:
        return math.inf

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))
