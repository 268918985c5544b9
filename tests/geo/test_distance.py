import math

import pytest

from src.attendance_sync.attendance_sync.core.constants import EARTH_RADIUS_METERS
from src.attendance_sync.attendance_sync.core.exceptions import ValidationError
from src.attendance_sync.attendance_sync.geo.distance import haversine_distance_meters, is_within_radius, nearest_site
from src.attendance_sync.attendance_sync.geo.model import Coordinates, GeofenceSite

NAIROBI = Coordinates(-1.2921, 36.8219)
MOMBASA = Coordinates(-4.0435, 39.6682)

POINTS = [
    Coordinates(0.0, 0.0),
    NAIROBI,
    MOMBASA,
    Coordinates(89.9, -179.9),
    Coordinates(-45.5, 170.25),
]


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_distance_is_symmetric(a, b):
    assert haversine_distance_meters(a, b) == haversine_distance_meters(b, a)


@pytest.mark.parametrize("a", POINTS)
def test_distance_to_self_is_zero(a):
    assert haversine_distance_meters(a, a) == 0


def test_one_degree_of_latitude():
    d = haversine_distance_meters(Coordinates(0.0, 36.0), Coordinates(1.0, 36.0))
    assert d == pytest.approx(math.pi / 180 * EARTH_RADIUS_METERS)


def test_nairobi_to_mombasa_is_about_440_km():
    d = haversine_distance_meters(NAIROBI, MOMBASA)
    assert 430_000 < d < 445_000


def test_antipodal_points_give_half_circumference():
    d = haversine_distance_meters(Coordinates(0.0, 0.0), Coordinates(0.0, 180.0))
    assert d == pytest.approx(math.pi * EARTH_RADIUS_METERS)


def test_deterministic():
    results = {haversine_distance_meters(NAIROBI, MOMBASA) for _ in range(50)}
    assert len(results) == 1


@pytest.mark.parametrize("radius", [0, 0.5, 100, 10_000])
def test_point_on_center_is_within_any_radius(radius):
    assert is_within_radius(NAIROBI, NAIROBI, radius) is True


def test_radius_boundary_is_inclusive():
    point = Coordinates(-1.2930, 36.8219)
    d = haversine_distance_meters(point, NAIROBI)
    assert is_within_radius(point, NAIROBI, d) is True
    assert is_within_radius(point, NAIROBI, d - 0.01) is False


def test_nearest_site_picks_closest():
    near = GeofenceSite(id="1", name="CBD", latitude=-1.2925, longitude=36.8219, radius_meters=50)
    far = GeofenceSite(id="2", name="Coast", latitude=-4.0435, longitude=39.6682, radius_meters=50)

    site, distance = nearest_site(NAIROBI, [far, near])
    assert site == near
    assert distance == pytest.approx(haversine_distance_meters(NAIROBI, near.center))
    assert nearest_site(NAIROBI, []) is None


@pytest.mark.parametrize("lat,lng", [(91, 0), (-90.5, 0), (0, 181), (float("nan"), 0)])
def test_invalid_coordinates_rejected(lat, lng):
    with pytest.raises(ValidationError):
        Coordinates(lat, lng)
