import copy
import json
from unittest import TestCase

from mapcoords.utils.geojson import (
    check_if_layer_fits_extent_for_projection,
    get_geojson_extent,
    reproject_geojson,
    to_lat_lon_coordinates,
)
from tests import get_test_dir


def _load_feature_collection():
    with open(get_test_dir() / "test_assets" / "feature_collection.json") as f:
        return json.load(f)


def _layer(crs, coordinates):
    return {
        "name": "test",
        "bbox": {"crs": crs},
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": coordinates},
                "properties": {"prop0": "value0"},
            }
        ],
    }


class TestReprojectGeoJSON(TestCase):
    def test_reproject_feature_collection(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [-112.50042920000001, 42.22829164089942]},
                    "properties": {"serial_num": "12C324776", "status": "A"},
                    "id": 0,
                }
            ],
        }

        reprojected = reproject_geojson(collection, "EPSG:4326", "EPSG:900913")
        feature = reprojected["features"][0]

        self.assertEqual(reprojected["type"], "FeatureCollection")
        self.assertEqual(feature["type"], "Feature")
        self.assertEqual(feature["geometry"]["type"], "Point")
        self.assertEqual(feature["properties"], {"serial_num": "12C324776", "status": "A"})
        self.assertEqual(feature["id"], 0)
        self.assertAlmostEqual(feature["geometry"]["coordinates"][0], -12523490.492568726, places=3)
        self.assertAlmostEqual(feature["geometry"]["coordinates"][1], 5195238.005360028, places=3)

    def test_reproject_preserves_structure(self):
        collection = _load_feature_collection()

        reprojected = reproject_geojson(collection, "EPSG:4326", "EPSG:3857")

        for original, feature in zip(collection["features"], reprojected["features"]):
            self.assertEqual(original["properties"], feature["properties"])
            self.assertEqual(original["geometry"]["type"], feature["geometry"]["type"])
        polygon = reprojected["features"][3]["geometry"]["coordinates"]
        self.assertEqual(len(polygon), 1)
        self.assertEqual(len(polygon[0]), 5)
        self.assertEqual(reprojected["features"][3]["id"], "square")
        nested = reprojected["features"][1]["geometry"]["geometries"][0]["coordinates"]
        self.assertAlmostEqual(nested[0], 11354588.06, places=1)

    def test_reproject_does_not_modify_input(self):
        collection = _load_feature_collection()
        before = copy.deepcopy(collection)

        reproject_geojson(collection, "EPSG:4326", "EPSG:3857")

        self.assertEqual(collection, before)

    def test_reproject_keeps_third_dimension(self):
        point = {"type": "Point", "coordinates": [0, 0, 120.5]}

        reprojected = reproject_geojson(point, "EPSG:4326", "EPSG:3857")

        self.assertEqual(len(reprojected["coordinates"]), 3)
        self.assertEqual(reprojected["coordinates"][2], 120.5)

    def test_reproject_unknown_crs_returns_copy(self):
        collection = _load_feature_collection()

        reprojected = reproject_geojson(collection, "EPSG:4326", "EPSG:3004")

        self.assertEqual(reprojected, collection)
        self.assertIsNot(reprojected, collection)

    def test_reproject_keeps_geometry_that_cannot_be_projected(self):
        collection = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [10, 90]}, "properties": {}},
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [10, 0]}, "properties": {}},
            ],
        }

        reprojected = reproject_geojson(collection, "EPSG:4326", "EPSG:3857")

        self.assertEqual(reprojected["features"][0]["geometry"]["coordinates"], [10, 90])
        self.assertAlmostEqual(reprojected["features"][1]["geometry"]["coordinates"][0], 1113194.91, places=1)

    def test_reproject_feature_without_geometry(self):
        feature = {"type": "Feature", "geometry": None, "properties": {"a": 1}}

        self.assertEqual(reproject_geojson(feature, "EPSG:4326", "EPSG:3857"), feature)

    def test_reproject_unknown_type(self):
        with self.assertRaises(ValueError):
            reproject_geojson({"type": "Circle", "coordinates": [0, 0]}, "EPSG:4326", "EPSG:3857")


class TestGeoJSONExtent(TestCase):
    def test_point_extent(self):
        feature = {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [125.6, 10.1]},
            "properties": {"name": "Dinagat Islands"},
        }

        self.assertEqual(get_geojson_extent(feature), [125.6, 10.1, 125.6, 10.1])

    def test_feature_collection_extent(self):
        self.assertEqual(get_geojson_extent(_load_feature_collection()), [100, 0, 105, 1])

    def test_polygon_extent(self):
        feature = _load_feature_collection()["features"][3]

        self.assertEqual(get_geojson_extent(feature), [100, 0, 101, 1])

    def test_empty_extent(self):
        self.assertIsNone(get_geojson_extent({"type": "FeatureCollection", "features": []}))


class TestLayerFitsExtent(TestCase):
    def test_out_of_bounds_geographic_layer(self):
        self.assertFalse(check_if_layer_fits_extent_for_projection(_layer("EPSG:4326", [-150, 94])))

    def test_within_bounds_geographic_layer(self):
        self.assertTrue(check_if_layer_fits_extent_for_projection(_layer("EPSG:4326", [-150, 90])))

    def test_out_of_bounds_mercator_layer(self):
        self.assertFalse(
            check_if_layer_fits_extent_for_projection(_layer("EPSG:3857", [-20026376, 23026376]))
        )

    def test_within_bounds_mercator_layer(self):
        self.assertTrue(
            check_if_layer_fits_extent_for_projection(_layer("EPSG:3857", [-20026376, 13026376]))
        )


class TestLatLonCoordinates(TestCase):
    def test_point(self):
        self.assertEqual(to_lat_lon_coordinates({"type": "Point", "coordinates": [125.6, 10.1]}), [10.1, 125.6])

    def test_line_string(self):
        line = {"type": "LineString", "coordinates": [[1, 2], [3, 4]]}

        self.assertEqual(to_lat_lon_coordinates(line), [[2, 1], [4, 3]])
        self.assertEqual(line["coordinates"], [[1, 2], [3, 4]])

    def test_polygon(self):
        polygon = {"type": "Polygon", "coordinates": [[[1, 2], [3, 4], [5, 6], [1, 2]]]}

        self.assertEqual(to_lat_lon_coordinates(polygon), [[[2, 1], [4, 3], [6, 5], [2, 1]]])
