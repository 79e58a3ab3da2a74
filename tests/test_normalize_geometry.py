from unittest import TestCase

from mapcoords.utils.geojson import (
    get_lon_lat_from_point,
    get_normalized_lat_lon,
    normalize_geometry,
)
from mapcoords.utils.geo import normalize_lng


def _flatten(coordinates):
    if isinstance(coordinates[0], (int, float)):
        return [coordinates]
    return [p for c in coordinates for p in _flatten(c)]


class TestNormalizeGeometry(TestCase):
    def assertCoordinatesAlmostEqual(self, actual, expected):
        actual_positions = _flatten(actual)
        expected_positions = _flatten(expected)
        self.assertEqual(len(actual_positions), len(expected_positions))
        for a, e in zip(actual_positions, expected_positions):
            self.assertAlmostEqual(a[0], e[0], places=9)
            self.assertEqual(a[1], e[1])

    def test_point(self):
        geometry = {"type": "Point", "coordinates": [-210, 2]}

        normalized = normalize_geometry(geometry)

        self.assertEqual(normalized, {"type": "Point", "coordinates": [150, 2]})
        self.assertEqual(geometry["coordinates"], [-210, 2])

    def test_line_string(self):
        geometry = {"type": "LineString", "coordinates": [[-230.0, 10.0], [-210.0, 30.0], [-240.0, 40.0]]}

        normalized = normalize_geometry(geometry)

        self.assertEqual(normalized["type"], "LineString")
        self.assertCoordinatesAlmostEqual(normalized["coordinates"], [[130, 10], [150, 30], [120, 40]])

    def test_polygon(self):
        geometry = {
            "type": "Polygon",
            "coordinates": [
                [[-190.0, 10.0], [-192.0, 45.0], [196.0, 40.0], [-198.0, 20.0], [-200.0, 10.0]],
                [[200.0, 30.0], [210.0, 35.0], [-220.0, 20.0], [230.0, 30.0]],
            ],
        }

        normalized = normalize_geometry(geometry)

        self.assertCoordinatesAlmostEqual(
            normalized["coordinates"],
            [
                [[170, 10], [168, 45], [-164, 40], [162, 20], [160, 10]],
                [[-160, 30], [-150, 35], [140, 20], [-130, 30]],
            ],
        )

    def test_multi_point(self):
        geometry = {
            "type": "MultiPoint",
            "coordinates": [[-210.0, 40.0], [-140.0, 30.0], [-220.0, 20.0], [-230.0, 10.0]],
        }

        normalized = normalize_geometry(geometry)

        self.assertCoordinatesAlmostEqual(
            normalized["coordinates"], [[150, 40], [-140, 30], [140, 20], [130, 10]]
        )

    def test_multi_line_string(self):
        geometry = {
            "type": "MultiLineString",
            "coordinates": [
                [[-210.0, 10.0], [-220.0, 20.0], [-210.0, 40.0]],
                [[-189.0, 40.0], [-230.0, 30.0], [-240.0, 20.0], [230.0, 10.0]],
            ],
        }

        normalized = normalize_geometry(geometry)

        self.assertCoordinatesAlmostEqual(
            normalized["coordinates"],
            [[[150, 10], [140, 20], [150, 40]], [[171, 40], [130, 30], [120, 20], [-130, 10]]],
        )

    def test_multi_polygon(self):
        geometry = {
            "type": "MultiPolygon",
            "coordinates": [
                [[[230.0, 20.0], [545.0, 40.0], [-210.0, 40.0], [330.0, 20.0]]],
                [[[-215.0, 5.0], [240.0, 10.0], [310.0, 20.0], [-205.0, 10.0], [215.0, 5.0]]],
            ],
        }

        normalized = normalize_geometry(geometry)

        self.assertCoordinatesAlmostEqual(
            normalized["coordinates"],
            [
                [[[-130, 20], [-175, 40], [150, 40], [-30, 20]]],
                [[[145, 5], [-120, 10], [-50, 20], [155, 10], [-145, 5]]],
            ],
        )

    def test_feature_collection(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [370, 2]}, "properties": {"a": 1}}
            ],
        }

        normalized = normalize_geometry(collection)

        self.assertEqual(normalized["features"][0]["geometry"]["coordinates"], [10, 2])
        self.assertEqual(normalized["features"][0]["properties"], {"a": 1})

    def test_idempotent(self):
        geometry = {
            "type": "MultiLineString",
            "coordinates": [[[-189.0, 40.0], [-230.0, 30.0], [545.0, 20.0], [179.5, 10.0]]],
        }

        once = normalize_geometry(geometry)
        twice = normalize_geometry(once)

        self.assertCoordinatesAlmostEqual(twice["coordinates"], once["coordinates"])

    def test_normalize_lng_range(self):
        for lng in (-1640, -540, -180, -179.5, 0, 179.5, 180, 369, 930):
            with self.subTest(lng=lng):
                self.assertGreaterEqual(normalize_lng(lng), -180)
                self.assertLess(normalize_lng(lng), 180)


class TestNormalizedLatLon(TestCase):
    def test_get_normalized_lat_lon(self):
        self.assertEqual(get_normalized_lat_lon({"lat": 45, "lng": 9}), {"lat": 45, "lng": 9})

        normalized = get_normalized_lat_lon({"lat": 45, "lng": 369})
        self.assertEqual({"lat": round(normalized["lat"]), "lng": round(normalized["lng"])}, {"lat": 45, "lng": 9})

        normalized = get_normalized_lat_lon({"lat": 45, "lng": -351})
        self.assertEqual({"lat": round(normalized["lat"]), "lng": round(normalized["lng"])}, {"lat": 45, "lng": 9})

    def test_latitude_is_not_wrapped(self):
        self.assertEqual(get_normalized_lat_lon({"lat": 95, "lng": 9})["lat"], 95)

    def test_get_lon_lat_from_point(self):
        self.assertEqual(get_lon_lat_from_point({"latlng": {"lat": 40, "lng": -80}}), [-80, 40])

    def test_get_lon_lat_from_point_beyond_antimeridian(self):
        self.assertEqual(get_lon_lat_from_point({"latlng": {"lat": 40, "lng": -280}}), [80, 40])
        self.assertEqual(get_lon_lat_from_point({"latlng": {"lat": 40, "lng": 280}}), [-80, 40])
