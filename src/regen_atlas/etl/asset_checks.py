"""Programmatically defined Dagster asset checks for the report tables.

Every asset that produces one of the tables described in
:mod:`regen_atlas.metadata.resources` gets a blocking check that validates it against
a Pandera schema built from the table metadata. A failing check stops everything
downstream of the asset from running.
"""

from typing import Any

import geopandas as gpd
import pandas as pd
import pandera as pr
from dagster import AssetCheckResult, AssetChecksDefinition, AssetKey, asset_check

from regen_atlas.metadata.classes import Resource


def _collect_asset_metadata(asset_value) -> dict[str, Any]:
    """Collect basic metadata about the asset."""
    metadata = {
        "asset_type": str(type(asset_value)),
        "asset_shape": list(getattr(asset_value, "shape", ())),
    }
    if isinstance(asset_value, gpd.GeoDataFrame):
        metadata["crs"] = str(asset_value.crs)
    return metadata


def _collect_dtype_mismatches(asset_value, resource: Resource) -> dict[str, Any]:
    """Compare the actual column dtypes to the ones the metadata calls for."""
    actual = {col: str(dtype) for col, dtype in asset_value.dtypes.items()}
    expected = {name: str(dtype) for name, dtype in resource.to_pandas_dtypes().items()}
    missing = sorted(set(expected) - set(actual))
    mismatches = {
        name: {"expected": dtype, "actual": actual[name]}
        for name, dtype in expected.items()
        if name in actual and actual[name] != dtype
    }
    metadata: dict[str, Any] = {}
    if missing:
        metadata["missing_columns"] = missing
    if mismatches:
        metadata["type_mismatches"] = mismatches
    return metadata


def _process_schema_errors(schema_errors: pr.errors.SchemaErrors) -> dict[str, Any]:
    """Process Pandera schema errors into structured metadata."""
    return {
        "errors": [
            {
                "error_type": type(err).__name__,
                "error_message": str(err),
                "failure_cases": str(getattr(err, "failure_cases", None)),
            }
            for err in schema_errors.schema_errors
        ],
        "num_errors": len(schema_errors.schema_errors),
    }


def asset_check_from_schema(
    asset_key: AssetKey,
    resources: dict[str, Resource],
) -> AssetChecksDefinition | None:
    """Create a dagster asset check based on the resource schema, if defined."""
    resource = resources.get(asset_key.to_user_string())
    if resource is None:
        return None
    pandera_schema = resource.to_pandera()

    @asset_check(asset=asset_key, blocking=True)
    def pandera_schema_check(asset_value: pd.DataFrame) -> AssetCheckResult:
        metadata = _collect_asset_metadata(asset_value) | _collect_dtype_mismatches(
            asset_value, resource
        )
        try:
            pandera_schema.validate(asset_value, lazy=True)
        except pr.errors.SchemaErrors as schema_errors:
            metadata.update(_process_schema_errors(schema_errors))
            return AssetCheckResult(passed=False, metadata=metadata)
        return AssetCheckResult(passed=True, metadata=metadata)

    return pandera_schema_check
