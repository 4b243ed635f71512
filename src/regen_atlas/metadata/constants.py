"""Metadata and operational constants."""

FIELD_DTYPES_PANDAS: dict[str, str] = {
    "string": "string",
    "number": "float64",
    "integer": "Int64",
    "boolean": "boolean",
    "date": "datetime64[ns]",
    "datetime": "datetime64[ns]",
}
"""Pandas data type by field type.

Geometry fields have no entry: they are carried by the GeoDataFrame and are never cast.
"""

FIELD_TYPES: list[str] = [*FIELD_DTYPES_PANDAS, "geometry"]

CRS_GEOGRAPHIC = "EPSG:4326"
"""Coordinate reference system of plant coordinates and stored region geometries."""

CRS_EQUAL_AREA = "EPSG:3035"
"""ETRS89 Lambert Azimuthal Equal-Area, for region areas across Europe."""
