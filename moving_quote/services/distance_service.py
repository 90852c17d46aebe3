import math

from moving_quote.models.geo import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(origin: Coordinate, destination: Coordinate) -> float:
    """
    Great-circle (haversine) distance in kilometres between two points,
    on a spherical earth of radius 6371 km.
    """
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(destination.lat)
    d_lat = lat2 - lat1
    d_lon = math.radians(destination.lon - origin.lon)

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))
