"""Metadata data classes."""

import copy
from typing import Any, Literal

import pandas as pd
import pandera as pr
import pydantic

import regen_atlas.logging_helpers
from regen_atlas.metadata.constants import FIELD_DTYPES_PANDAS
from regen_atlas.metadata.fields import FIELD_METADATA
from regen_atlas.metadata.resources import RESOURCE_METADATA

logger = regen_atlas.logging_helpers.get_logger(__name__)


# ---- Base ---- #


class Base(pydantic.BaseModel):
    """Custom Pydantic base class.

    Forbids extra attributes and re-validates on assignment, so that metadata typos are
    caught when the module is imported rather than when a table is formatted.
    """

    model_config = pydantic.ConfigDict(
        extra="forbid",
        validate_assignment=True,
        populate_by_name=True,
    )


SnakeCase = pydantic.constr(
    min_length=1, strict=True, pattern=r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$"
)
"""Snake-case variable name :class:`str` (e.g. 'nuts_id', 'core_opsd__plants')."""

ResourceName = pydantic.constr(
    min_length=1, strict=True, pattern=r"^[a-z][a-z0-9]*(_{1,2}[a-z0-9]+)*$"
)
"""Table name :class:`str`, snake case with a double underscore after the layer."""


# ---- Fields ---- #


class FieldConstraints(Base):
    """Field constraints (`resource.schema.fields[...].constraints`).

    See https://specs.frictionlessdata.io/table-schema/#constraints.
    """

    required: bool = False
    enum: list[str | int] | None = None
    minimum: float | None = None
    maximum: float | None = None

    @pydantic.model_validator(mode="after")
    def _check_bounds(self):
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError(f"minimum {self.minimum} exceeds maximum {self.maximum}")
        return self


class Field(Base):
    """Field (`resource.schema.fields[...]`).

    Examples:
        >>> field = Field(name='x', type='string', constraints={'enum': ['x', 'y']})
        >>> field.to_pandas_dtype()
        CategoricalDtype(categories=['x', 'y'], ordered=False, categories_dtype=object)
        >>> field = Field.from_id('nuts_id')
        >>> field.name
        'nuts_id'
    """

    name: SnakeCase
    type: Literal[  # noqa: A003
        "string",
        "number",
        "integer",
        "boolean",
        "date",
        "datetime",
        "geometry",
    ]
    description: str | None = None
    unit: str | None = None
    constraints: FieldConstraints = FieldConstraints()

    @pydantic.model_validator(mode="after")
    def _check_constraints(self):
        errors = []
        for key in ("minimum", "maximum"):
            if getattr(self.constraints, key) is not None and self.type not in (
                "number",
                "integer",
            ):
                errors.append(f"{key} not supported by {self.type} field")
        if self.constraints.enum and self.type not in ("string", "integer"):
            errors.append(f"enum not supported by {self.type} field")
        if errors:
            raise ValueError(f"{self.name}: {'; '.join(errors)}")
        return self

    @staticmethod
    def dict_from_id(x: str) -> dict:
        """Construct dictionary from field identifier (`Field.name`)."""
        return {"name": x, **copy.deepcopy(FIELD_METADATA[x])}

    @classmethod
    def from_id(cls, x: str) -> "Field":
        """Construct from field identifier (`Field.name`)."""
        return cls(**cls.dict_from_id(x))

    def to_pandas_dtype(self) -> str | pd.CategoricalDtype | None:
        """Return Pandas data type, or None for geometry fields."""
        if self.type == "geometry":
            return None
        if self.constraints.enum and self.type == "string":
            return pd.CategoricalDtype(self.constraints.enum)
        return FIELD_DTYPES_PANDAS[self.type]

    def to_pandera_column(self) -> pr.Column:
        """Return a pandera column that checks the field's type and constraints."""
        checks = []
        if self.constraints.minimum is not None:
            checks.append(pr.Check.ge(self.constraints.minimum))
        if self.constraints.maximum is not None:
            checks.append(pr.Check.le(self.constraints.maximum))
        if self.constraints.enum and self.type == "integer":
            checks.append(pr.Check.isin(self.constraints.enum))
        return pr.Column(
            self.to_pandas_dtype(),
            checks=checks,
            nullable=not self.constraints.required,
            description=self.description,
        )


# ---- Resources ---- #


class Schema(Base):
    """Table schema (`resource.schema`).

    See https://specs.frictionlessdata.io/table-schema.
    """

    fields_: list[Field] = pydantic.Field(alias="fields", min_length=1)
    primary_key: list[SnakeCase] = []

    @pydantic.model_validator(mode="after")
    def _check_primary_key(self):
        names = [field.name for field in self.fields_]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names: {names}")
        if missing := [key for key in self.primary_key if key not in names]:
            raise ValueError(f"Primary key fields missing from schema: {missing}")
        return self


class Resource(Base):
    """A table produced while building the report.

    Examples:
        >>> resource = Resource.from_id('core_nuts__regions')
        >>> resource.get_field_names()[:2]
        ['nuts_id', 'region_name']
    """

    name: ResourceName
    description: str | None = None
    schema_: Schema = pydantic.Field(alias="schema")

    @staticmethod
    def dict_from_id(x: str) -> dict:
        """Construct dictionary from resource name.

        Field names in the schema are expanded into their full field metadata, primary
        key fields and any fields listed under ``required`` are marked required.
        """
        obj = copy.deepcopy(RESOURCE_METADATA[x])
        schema = obj["schema"]
        required = set(schema.pop("required", [])) | set(schema.get("primary_key", []))
        fields = []
        for name in schema["fields"]:
            field = Field.dict_from_id(name)
            if name in required:
                field.setdefault("constraints", {})["required"] = True
            fields.append(field)
        schema["fields"] = fields
        return {"name": x, **obj}

    @classmethod
    def from_id(cls, x: str) -> "Resource":
        """Construct from resource name."""
        return cls(**cls.dict_from_id(x))

    def get_field_names(self) -> list[str]:
        """Return a list of all the field names in the resource schema."""
        return [field.name for field in self.schema_.fields_]

    def get_field(self, name: str) -> Field:
        """Return field with the given name if it's part of the Resource."""
        names = self.get_field_names()
        if name not in names:
            raise KeyError(f"The field {name} is not part of the {self.name} schema.")
        return self.schema_.fields_[names.index(name)]

    def to_pandas_dtypes(self) -> dict[str, str | pd.CategoricalDtype]:
        """Return Pandas data type of each non-geometry field by field name."""
        return {
            f.name: f.to_pandas_dtype()
            for f in self.schema_.fields_
            if f.type != "geometry"
        }

    def to_pandera(self) -> pr.DataFrameSchema:
        """Return a pandera schema for validating dataframes of this resource."""
        return pr.DataFrameSchema(
            name=self.name,
            columns={f.name: f.to_pandera_column() for f in self.schema_.fields_},
            unique=self.schema_.primary_key or None,
            strict=False,
        )

    def format_df(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Format a dataframe according to the resource's table schema.

        * DataFrame columns not in the schema are dropped.
        * Any columns missing from the DataFrame are added with the right dtype, but
          will be empty.
        * All non-geometry columns are cast to their specified pandas dtypes.
        * Columns are put in schema order.

        GeoDataFrames stay GeoDataFrames, keeping their active geometry column and CRS.
        """
        dtypes = self.to_pandas_dtypes()
        if df is None:
            return pd.DataFrame({n: pd.Series(dtype=d) for n, d in dtypes.items()})
        df = df.copy()
        for name, dtype in dtypes.items():
            if name not in df.columns:
                df[name] = pd.Series(index=df.index, dtype=dtype)
            elif isinstance(dtype, pd.CategoricalDtype):
                uncategorized = set(df[name].dropna().unique()) - set(
                    dtype.categories
                )
                if uncategorized:
                    logger.warning(
                        f"Values in {name} not in the categorical values will be set "
                        f"to null: {sorted(map(str, uncategorized))}"
                    )
                df[name] = df[name].astype("object").astype(dtype)
            elif dtype == "Int64":
                df[name] = pd.to_numeric(df[name]).round().astype(dtype)
            else:
                df[name] = df[name].astype(dtype)
        return df[[name for name in self.get_field_names() if name in df.columns]]

    def enforce_schema(self, df: pd.DataFrame) -> pd.DataFrame:
        """Drop columns not in the schema, enforce types and validate the primary key.

        Raises:
            ValueError: if schema columns are missing from the dataframe, the primary
                key contains duplicates, or the primary key contains nulls.
        """
        expected_cols = pd.Index(
            [f.name for f in self.schema_.fields_ if f.type != "geometry"]
        )
        missing_cols = list(expected_cols.difference(df.columns))
        if missing_cols:
            raise ValueError(
                f"{self.name}: Missing columns found when enforcing table "
                f"schema: {missing_cols}"
            )
        df = self.format_df(df)
        pk = self.schema_.primary_key
        if pk and df.loc[:, pk].isna().any(axis=None):
            raise ValueError(f"{self.name} Null values found in primary key columns.")
        if pk and not df[df.duplicated(subset=pk)].empty:
            raise ValueError(
                f"{self.name} Duplicate primary keys when enforcing schema."
            )
        return df

    def validate_df(self, df: pd.DataFrame, lazy: bool = True) -> pd.DataFrame:
        """Validate a dataframe against the resource's pandera schema."""
        return self.to_pandera().validate(df, lazy=lazy)
