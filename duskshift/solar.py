"""
Solar elevation from time and geographic position.

Low-precision NOAA solar position algorithm (after "Astronomical
Algorithms" by Jean Meeus), accurate to about 0.01 degrees for dates
within a few centuries of J2000.0. All angles are degrees at the module
boundary and radians internally.
"""

import math

from duskshift.types import Location

UNIX_EPOCH_JULIAN_DAY = 2440587.5
J2000_JULIAN_DAY = 2451545.0
DAYS_PER_CENTURY = 36525.0
SECONDS_PER_DAY = 86400.0
MINUTES_PER_DAY = 1440.0


def julian_day_from_epoch(epoch_seconds: float) -> float:
    return epoch_seconds / SECONDS_PER_DAY + UNIX_EPOCH_JULIAN_DAY


def julian_century_from_julian_day(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - J2000_JULIAN_DAY) / DAYS_PER_CENTURY


def _sun_geom_mean_lon(t: float) -> float:
    return math.radians((280.46646 + t * (36000.76983 + t * 0.0003032)) % 360.0)


def _sun_geom_mean_anomaly(t: float) -> float:
    return math.radians(357.52911 + t * (35999.05029 - t * 0.0001537))


def _earth_orbit_eccentricity(t: float) -> float:
    return 0.016708634 - t * (0.000042037 + t * 0.0000001267)


def _sun_equation_of_center(t: float) -> float:
    m = _sun_geom_mean_anomaly(t)
    c = (
        math.sin(m) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + math.sin(2.0 * m) * (0.019993 - 0.000101 * t)
        + math.sin(3.0 * m) * 0.000289
    )
    return math.radians(c)


def _sun_apparent_lon(t: float) -> float:
    """True longitude corrected for nutation and aberration."""
    true_lon = _sun_geom_mean_lon(t) + _sun_equation_of_center(t)
    omega = math.radians(125.04 - 1934.136 * t)
    return math.radians(math.degrees(true_lon) - 0.00569 - 0.00478 * math.sin(omega))


def _mean_ecliptic_obliquity(t: float) -> float:
    seconds = 21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))
    return math.radians(23.0 + (26.0 + seconds / 60.0) / 60.0)


def _obliquity_corr(t: float) -> float:
    omega = math.radians(125.04 - 1934.136 * t)
    return math.radians(math.degrees(_mean_ecliptic_obliquity(t)) + 0.00256 * math.cos(omega))


def _solar_declination(t: float) -> float:
    return math.asin(math.sin(_obliquity_corr(t)) * math.sin(_sun_apparent_lon(t)))


def _equation_of_time(t: float) -> float:
    """Difference between true and mean solar time, in minutes."""
    epsilon = _obliquity_corr(t)
    l0 = _sun_geom_mean_lon(t)
    e = _earth_orbit_eccentricity(t)
    m = _sun_geom_mean_anomaly(t)
    y = math.tan(epsilon / 2.0) ** 2

    eq_time = (
        y * math.sin(2.0 * l0)
        - 2.0 * e * math.sin(m)
        + 4.0 * e * y * math.sin(m) * math.cos(2.0 * l0)
        - 0.5 * y * y * math.sin(4.0 * l0)
        - 1.25 * e * e * math.sin(2.0 * m)
    )
    return 4.0 * math.degrees(eq_time)


def _hour_angle(jd: float, t: float, lon: float) -> float:
    """Hour angle in radians from true solar time at longitude lon (degrees)."""
    minutes_since_utc_midnight = ((jd + 0.5) % 1.0) * MINUTES_PER_DAY
    true_solar_time = minutes_since_utc_midnight + _equation_of_time(t) + 4.0 * lon
    return math.radians(true_solar_time / 4.0 - 180.0)


def solar_elevation(epoch_seconds: float, lat: float, lon: float) -> float:
    """
    Angle of the sun above the horizon.

    Args:
        epoch_seconds: Seconds since the unix epoch (UTC)
        lat: Latitude in degrees, north positive
        lon: Longitude in degrees, east positive

    Returns:
        Solar elevation in degrees, without atmospheric refraction
    """
    jd = julian_day_from_epoch(epoch_seconds)
    t = julian_century_from_julian_day(jd)
    decl = _solar_declination(t)
    ha = _hour_angle(jd, t, lon)
    phi = math.radians(lat)

    sin_elev = math.cos(ha) * math.cos(phi) * math.cos(decl) + math.sin(phi) * math.sin(decl)
    # Rounding can push the argument a hair past +-1 at the poles
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_elev))))


def elevation_table(start_epoch: float, location: Location, hours: int = 24) -> list[tuple[float, float]]:
    """Hourly (epoch seconds, elevation) samples starting at start_epoch."""
    return [
        (
            start_epoch + h * 3600.0,
            solar_elevation(start_epoch + h * 3600.0, location.latitude, location.longitude),
        )
        for h in range(hours)
    ]
