"""PyTest configuration module.

Defines useful fixtures. All tests run against a small synthetic set of inputs written
to a temporary directory: four NUTS 3 squares in western Germany, a dozen plants, and
two overlapping SMARD exports.
"""

import logging
from pathlib import Path

import geopandas as gpd
import matplotlib
import pandas as pd
import pytest
from shapely.geometry import box

from regen_atlas.settings import (
    GenerationSettings,
    PlantSettings,
    RegionSettings,
    ReportSettings,
)
from regen_atlas.workspace.setup import RegenPaths

matplotlib.use("Agg")

logger = logging.getLogger(__name__)

PLANTS_CSV = """\
commissioning_date,decommissioning_date,energy_source_level_1,energy_source_level_2,energy_source_level_3,technology,electrical_capacity,voltage_level,tso,dso,dso_id,eeg_id,federal_state,postcode,municipality_code,municipality,address,lat,lon,data_source,comment,nuts_1_region,nuts_2_region,nuts_3_region
2010-05-01,,Renewable energy,Solar,,Photovoltaics,0.01,low voltage,TSO,DSO,01,E001,Hessen,06110,01,Alpha,,50.5,8.5,BNetzA,,DE1,DE11,DE111
2012-03-01,,Renewable energy,Solar,,Photovoltaics ground,5.0,medium voltage,TSO,DSO,01,E002,Hessen,06110,01,Beta,,50.5,9.5,BNetzA,,DE1,DE11,DE112
2015-07-01,,Renewable energy,Wind,Onshore,Onshore,3.0,high voltage,TSO,DSO,01,E003,Hessen,06110,01,Gamma,,51.5,8.5,BNetzA,,DE1,DE11,DE113
2016-01-15,,Renewable energy,Wind,Onshore,Onshore,2.5,high voltage,TSO,DSO,01,E004,Hessen,06110,01,Delta,,51.5,9.5,BNetzA,,DE1,DE11,DE114
2011-01-01,,Renewable energy,Bioenergy,Biomass and biogas,Biomass,0.5,medium voltage,TSO,DSO,01,E005,Hessen,06110,01,Alpha,,50.5,8.5,BNetzA,,DE1,DE11,DE111
2018-06-01,,Renewable energy,Solar,,Photovoltaics,0.02,low voltage,TSO,DSO,01,E006,Hessen,06110,01,Delta,,51.5,9.5,BNetzA,,DE1,DE11,DE114
2014-04-01,2020-01-01,Renewable energy,Wind,Onshore,Onshore,2.0,high voltage,TSO,DSO,01,E007,Hessen,06110,01,Gamma,,51.5,8.5,BNetzA,,DE1,DE11,DE113
2005-09-01,,Renewable energy,Hydro,Run-of-river,Run-of-river,0.3,medium voltage,TSO,DSO,01,,Hessen,06110,01,Beta,,50.2,9.2,BNetzA,,DE1,DE11,DE112
2019-02-01,,Renewable energy,Solar,,Photovoltaics,0.0,low voltage,TSO,DSO,01,E009,Hessen,06110,01,Beta,,50.5,9.5,BNetzA,,DE1,DE11,DE112
2019-03-01,,Renewable energy,Solar,,Photovoltaics,0.01,low voltage,TSO,DSO,01,E010,Hessen,06110,01,Beta,,,9.5,BNetzA,,DE1,DE11,DE112
2020-08-01,,Renewable energy,Solar,,Photovoltaics,0.04,low voltage,TSO,DSO,01,E011,Niedersachsen,06110,01,Omega,,53.0,8.5,BNetzA,,DE9,DE94,DE947
2017-01-01,,Renewable energy,Solar,,Photovoltaics,0.03,low voltage,TSO,DSO,01,E001,Hessen,06110,01,Alpha,,50.6,8.6,BNetzA,,DE1,DE11,DE111
2013-01-01,,Renewable energy,Marine,,Tidal,1.0,high voltage,TSO,DSO,01,E013,Hessen,06110,01,Alpha,,50.5,8.5,BNetzA,,DE1,DE11,DE111
"""
"""A tiny power plant list in the layout of the OPSD renewable power plants CSV.

* E007 is decommissioned, E009 has no capacity, E010 has no latitude, E013 is Marine.
* E011 lies north of all of the synthetic regions.
* The hydro plant has no EEG key, and E001 appears twice.
"""

SMARD_COLUMNS = {
    "Biomasse [MWh] Originalauflösungen": 4500.25,
    "Wasserkraft [MWh] Originalauflösungen": 1500.5,
    "Wind Onshore [MWh] Originalauflösungen": 12000.0,
    "Photovoltaik [MWh] Originalauflösungen": 2500.75,
    "Erdgas [MWh] Originalauflösungen": 8000.0,
}
"""SMARD production columns and the base value written to each of them."""


def german_number(value: float) -> str:
    """Format a number the way SMARD does, e.g. 1234.5 as ``1.234,50``."""
    return f"{value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def smard_csv(start: str, hours: int, offset: float = 0.0) -> str:
    """Build an hourly SMARD export with the split Datum and Anfang columns.

    Every value is its column's base value plus ``offset`` plus the hour number. The
    photovoltaics value of the fourth hour is missing.
    """
    lines = [";".join(["Datum", "Anfang", "Ende"] + list(SMARD_COLUMNS))]
    for n, ts in enumerate(pd.date_range(start, periods=hours, freq="h")):
        end = ts + pd.Timedelta(hours=1)
        values = [
            "-"
            if (n == 3 and col.startswith("Photovoltaik"))
            else german_number(base + offset + n)
            for col, base in SMARD_COLUMNS.items()
        ]
        lines.append(";".join([f"{ts:%d.%m.%Y}", f"{ts:%H:%M}", f"{end:%H:%M}"] + values))
    return "\n".join(lines) + "\n"


def make_regions() -> gpd.GeoDataFrame:
    """NUTS regions in the Eurostat attribute layout.

    Four 1x1 degree NUTS 3 squares covering 8-10 E and 50-52 N, the NUTS 2 region
    containing them, and one French NUTS 3 region.
    """
    return gpd.GeoDataFrame(
        {
            "NUTS_ID": ["DE111", "DE112", "DE113", "DE114", "DE11", "FR101"],
            "LEVL_CODE": [3, 3, 3, 3, 2, 3],
            "CNTR_CODE": ["DE", "DE", "DE", "DE", "DE", "FR"],
            "NAME_LATN": ["Alpha", "Beta", "Gamma", "Delta", "Region", "Paris"],
        },
        geometry=[
            box(8, 50, 9, 51),
            box(9, 50, 10, 51),
            box(8, 51, 9, 52),
            box(9, 51, 10, 52),
            box(8, 50, 10, 52),
            box(2, 48, 3, 49),
        ],
        crs="EPSG:4326",
    )


@pytest.fixture(scope="session")
def plants_csv_text() -> str:
    """The contents of the synthetic power plant list."""
    return PLANTS_CSV


@pytest.fixture(scope="session")
def raw_regions() -> gpd.GeoDataFrame:
    """Region boundaries as they are read from the shapefile."""
    return make_regions()


@pytest.fixture(scope="session")
def input_dir(tmp_path_factory) -> Path:
    """A directory holding all of the synthetic inputs."""
    in_dir = tmp_path_factory.mktemp("regen") / "input"
    in_dir.mkdir()
    (in_dir / "plants.csv").write_text(PLANTS_CSV, encoding="utf-8")
    (in_dir / "nuts").mkdir()
    make_regions().to_file(in_dir / "nuts" / "regions.shp")
    smard_dir = in_dir / "smard"
    smard_dir.mkdir()
    (smard_dir / "generation_a.csv").write_text(
        smard_csv("2023-01-01 00:00", hours=48), encoding="utf-8"
    )
    (smard_dir / "generation_b.csv").write_text(
        smard_csv("2023-01-02 00:00", hours=72, offset=100.0), encoding="utf-8"
    )
    return in_dir


@pytest.fixture(scope="session", autouse=True)
def configure_paths_for_tests(input_dir, tmp_path_factory) -> RegenPaths:
    """Point REGEN_INPUT at the synthetic inputs and REGEN_OUTPUT at a temp dir."""
    out_dir = tmp_path_factory.mktemp("regen") / "output"
    out_dir.mkdir()
    RegenPaths.set_path_overrides(
        input_dir=str(input_dir.resolve()),
        output_dir=str(out_dir.resolve()),
    )
    logger.info(f"Using temporary REGEN_INPUT {input_dir} and REGEN_OUTPUT {out_dir}")
    return RegenPaths()


@pytest.fixture(scope="session")
def report_settings() -> ReportSettings:
    """Report settings pointing at the synthetic inputs."""
    return ReportSettings(
        title="Synthetic report",
        plants=PlantSettings(plants_csv="plants.csv"),
        regions=RegionSettings(nuts_shapefile="nuts/regions.shp"),
        generation=GenerationSettings(generation_dir="smard"),
    )
