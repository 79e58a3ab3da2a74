import json
from unittest import TestCase

from mapcoords.constructs.point import ProjectedPoint
from mapcoords.constructs.projection import ProjectionDefinition
from mapcoords.projections.registry import ProjectionRegistry
from mapcoords.utils.exceptions import TransformationUnavailable
from mapcoords.utils.geo import (
    calculate_azimuth,
    convert_degrees_to_radian,
    convert_radian_to_degrees,
    get_projected_bbox,
    get_wms_bounding_box,
    make_bbox_from_ows,
    parse_string,
    reproject,
    reproject_bbox,
    round_coord,
    transform_point,
)
from tests import get_test_dir


class TestReproject(TestCase):
    def test_reproject_without_crs(self):
        point = [45, 13]

        self.assertIsNone(reproject(point, "", ""))
        self.assertIsNone(reproject(point, None, None))
        self.assertIsNone(reproject(point, "EPSG:4326", None))

    def test_reproject_to_mercator(self):
        transformed = reproject([45, 13], "EPSG:4326", "EPSG:900913")

        self.assertIsInstance(transformed, ProjectedPoint)
        self.assertNotEqual(transformed.x, 45)
        self.assertNotEqual(transformed.y, 13)
        self.assertEqual(transformed.srs, "EPSG:900913")
        self.assertAlmostEqual(transformed.x, 5009377.085697311, places=3)

    def test_reproject_point_mapping(self):
        transformed = reproject({"x": 45, "y": 13}, "EPSG:4326", "EPSG:3857")

        self.assertAlmostEqual(transformed.x, 5009377.085697311, places=3)

    def test_reproject_round_trip(self):
        points = [[0, 0], [12.5, 41.9], [-79.84, 36.95], [179.9, -60]]
        for point in points:
            with self.subTest(point=point):
                there = reproject(point, "EPSG:4326", "EPSG:3857")
                back = reproject(there, "EPSG:3857", "EPSG:4326")
                self.assertAlmostEqual(back.x, point[0], places=7)
                self.assertAlmostEqual(back.y, point[1], places=7)

    def test_reproject_pole_to_mercator(self):
        self.assertIsNone(reproject([10, 90], "EPSG:4326", "EPSG:3857"))
        self.assertIsNone(reproject([10, -90], "EPSG:4326", "EPSG:900913"))
        self.assertIsNotNone(reproject([10, 89.5], "EPSG:4326", "EPSG:3857"))

    def test_transform_point_pole_to_mercator_raises(self):
        registry = ProjectionRegistry()

        with self.assertRaises(TransformationUnavailable):
            transform_point([10, 90], "EPSG:4326", "EPSG:3857", registry)

    def test_pole_to_transverse_mercator(self):
        registry = ProjectionRegistry(
            [
                ProjectionDefinition(
                    "EPSG:32632", "+proj=utm +zone=32 +datum=WGS84 +units=m +no_defs"
                )
            ]
        )

        self.assertIsNotNone(reproject([9, 90], "EPSG:4326", "EPSG:32632", registry=registry))

    def test_reproject_unknown_crs(self):
        self.assertIsNone(reproject([45, 13], "EPSG:4326", "EPSG:3004"))

    def test_reproject_with_custom_registry(self):
        registry = ProjectionRegistry(
            [
                ProjectionDefinition(
                    "EPSG:32632", "+proj=utm +zone=32 +datum=WGS84 +units=m +no_defs"
                )
            ]
        )

        transformed = reproject([9, 0], "EPSG:4326", "EPSG:32632", registry)

        self.assertAlmostEqual(transformed.x, 500000, places=3)
        self.assertAlmostEqual(transformed.y, 0, places=3)

    def test_reproject_bbox(self):
        bbox = [44, 12, 45, 13]

        projected = reproject_bbox(bbox, "EPSG:4326", "EPSG:900913")

        self.assertEqual(len(projected), 4)
        for original, value in zip(bbox, projected):
            self.assertNotEqual(original, value)
        self.assertLess(projected[0], projected[2])
        self.assertLess(projected[1], projected[3])

    def test_reproject_bbox_unavailable(self):
        self.assertIsNone(reproject_bbox([44, 12, 45, 13], "EPSG:4326", "EPSG:3004"))

    def test_get_projected_bbox(self):
        bbox = get_projected_bbox({"x": 0, "y": 0}, 1, 0, [10, 10])

        self.assertGreater(bbox.maxx, bbox.minx)
        self.assertGreater(bbox.maxy, bbox.miny)
        self.assertEqual(bbox.to_list(), [-5, -5, 5, 5])

    def test_get_projected_bbox_rotated(self):
        bbox = get_projected_bbox([0, 0], 1, 3.141592653589793 / 4, [10, 10])

        self.assertAlmostEqual(bbox.maxx, 50**0.5)
        self.assertAlmostEqual(bbox.miny, -(50**0.5))

    def test_calculate_azimuth(self):
        azimuth = calculate_azimuth([0, 0], [1, 1], "EPSG:900913")

        self.assertEqual(f"{azimuth:.2f}", "45.00")

    def test_calculate_azimuth_westward(self):
        azimuth = calculate_azimuth([0, 0], [-1, 0], "EPSG:4326")

        self.assertAlmostEqual(azimuth, 270)

    def test_calculate_azimuth_unknown_crs(self):
        self.assertIsNone(calculate_azimuth([0, 0], [1, 1], "EPSG:3004"))


class TestParsers(TestCase):
    def test_parse_string_number(self):
        self.assertEqual(parse_string("10000 500000"), {"x": 10000, "y": 500000})

    def test_parse_string_char(self):
        self.assertIsNone(parse_string("AAA00 500000"))
        self.assertIsNone(parse_string("10000"))

    def test_make_bbox_from_ows(self):
        self.assertEqual(make_bbox_from_ows([2, 2], [4, 4]), [2, 2, 4, 4])
        self.assertEqual(make_bbox_from_ows([4, 4], [2, 2]), [2, 2, 4, 4])
        self.assertEqual(make_bbox_from_ows([4, 2], [2, 4]), [2, 2, 4, 4])
        self.assertEqual(make_bbox_from_ows(["4", "2"], ["2", "4"]), [2, 2, 4, 4])

    def test_get_wms_bounding_box_no_data(self):
        self.assertIsNone(get_wms_bounding_box([]))
        self.assertIsNone(get_wms_bounding_box())

    def test_get_wms_bounding_box(self):
        with open(get_test_dir() / "test_assets" / "wms_bounding_boxes.json") as f:
            records = json.load(f)

        bbox = get_wms_bounding_box(records)

        self.assertEqual(bbox.crs, "EPSG:4326")
        self.assertAlmostEqual(bbox.minx, 11.074215226957271, places=9)
        self.assertAlmostEqual(bbox.miny, 43.70759642778742, places=9)
        self.assertAlmostEqual(bbox.maxx, 11.425777726908334, places=9)
        self.assertAlmostEqual(bbox.maxy, 43.96119355022118, places=9)

    def test_get_wms_bounding_box_geographic_only(self):
        records = [
            {"$": {"SRS": "EPSG:32632", "minx": "0", "miny": "0", "maxx": "1", "maxy": "1"}},
            {"$": {"SRS": "EPSG:4326", "minx": "10", "miny": "40", "maxx": "12", "maxy": "42"}},
        ]

        bbox = get_wms_bounding_box(records)

        self.assertEqual(bbox.to_list(), [10, 40, 12, 42])


class TestNumbers(TestCase):
    def test_round_coord_floor(self):
        self.assertEqual(round_coord(28.45, "floor", 0), 28)
        self.assertEqual(round_coord(28.55, "floor", 0), 28)
        self.assertEqual(round_coord(28.55, "floor", 2), 28.55)

    def test_round_coord(self):
        self.assertEqual(round_coord(28.55, "round", 1), 28.6)
        self.assertEqual(round_coord(28.45), 28)
        self.assertEqual(round_coord(28.41, "ceil", 1), 28.5)

    def test_round_coord_unknown_behaviour(self):
        with self.assertRaises(ValueError):
            round_coord(28.45, "truncate")

    def test_convert_radian_to_degrees(self):
        self.assertAlmostEqual(convert_radian_to_degrees(100), 5729.58, delta=0.1)
        self.assertAlmostEqual(convert_radian_to_degrees("100"), 5729.58, delta=0.1)

    def test_convert_degrees_to_radian(self):
        self.assertAlmostEqual(convert_degrees_to_radian(5729.6), 100, delta=0.1)
        self.assertAlmostEqual(convert_degrees_to_radian("5729.6"), 100, delta=0.1)
