"""Standard key names used in GeoJSON objects and application map state dictionaries.

Using consistent keys keeps the GeoJSON walkers and the map state parsers in agreement.
"""

# GeoJSON member names
TYPE_KEY = "type"
COORDINATES_KEY = "coordinates"
GEOMETRY_KEY = "geometry"
GEOMETRIES_KEY = "geometries"
FEATURES_KEY = "features"
PROPERTIES_KEY = "properties"

# Attribute bag used by XML-derived records (e.g. WMS capabilities parsed to dicts)
XML_ATTRIBUTES_KEY = "$"

# Application map state
SIZE_KEY = "size"
BBOX_KEY = "bbox"
BOUNDS_KEY = "bounds"
CRS_KEY = "crs"
