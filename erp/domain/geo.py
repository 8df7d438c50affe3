from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0

# Seoul City Hall; used until an admin configures the office location.
DEFAULT_COMPANY_LAT = 37.5666805
DEFAULT_COMPANY_LNG = 126.9784147
DEFAULT_RADIUS_M = 100.0


def validate_point(lat: float, lng: float) -> tuple[float, float]:
    lat_f, lng_f = float(lat), float(lng)
    if not (-90.0 <= lat_f <= 90.0):
        raise ValueError("latitude must be within [-90, 90]")
    if not (-180.0 <= lng_f <= 180.0):
        raise ValueError("longitude must be within [-180, 180]")
    return lat_f, lng_f


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two WGS84 points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def within_radius(distance_m: float, radius_m: float) -> bool:
    # Boundary counts as inside.
    return distance_m <= radius_m


def check_geofence(lat: float, lng: float, center_lat: float, center_lng: float, radius_m: float) -> dict:
    lat_f, lng_f = validate_point(lat, lng)
    distance = haversine_m(lat_f, lng_f, center_lat, center_lng)
    return {
        "distance_m": round(distance, 1),
        "radius_m": radius_m,
        "within": within_radius(distance, radius_m),
        "distance_text": format_distance(distance),
    }


def format_distance(distance_m: float) -> str:
    """85.2 -> '85m', 1234.5 -> '1.23km'."""
    if distance_m < 1000:
        return f"{distance_m:.0f}m"
    return f"{distance_m / 1000:.2f}km"


def format_coordinates(lat: float, lng: float) -> str:
    return f"{lat:.6f},{lng:.6f}"
