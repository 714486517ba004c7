"""Shared fixtures for isdkit tests."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from isdkit.registry import StationRegistry
from isdkit.station import StationRecord
from isdkit.table import StationTable

REGISTRY_CSV = """\
"USAF","WBAN","STATION NAME","CTRY","STATE","ICAO","LAT","LON","ELEV(M)","BEGIN","END"
"037720","99999","LONDON HEATHROW","UK","","EGLL","+51.478","-000.461","+0025.3","19730101","20231231"
"31660","99999","EDINBURGH","UK","","EGPH","+55.950","-003.373","+0041.0","19730101","20230615"
"725650","03017","DENVER INTL","US","CO","KDEN","+39.833","-104.658","+1650.2","19940718","20231231"
"999999","00123","BUOY 42","","","","","","","20050101","20101231"
"""


def make_station(**overrides: Any) -> StationRecord:
    """Build a station with sensible defaults for any field not given."""
    fields: dict[str, Any] = {
        "usaf_id": "037720",
        "wban_id": "99999",
        "name": "LONDON HEATHROW",
        "country_code": "UK",
        "state_code": None,
        "call_sign": "EGLL",
        "latitude": 51.48,
        "longitude": -0.45,
        "elevation_m": 25.3,
        "period_start": date(1973, 1, 1),
        "period_end": date(2023, 12, 31),
    }
    fields.update(overrides)
    return StationRecord(**fields)


@pytest.fixture
def heathrow() -> StationRecord:
    return make_station()


@pytest.fixture
def stations(heathrow: StationRecord) -> list[StationRecord]:
    """A small registry spanning countries, states, and end years.

    The latest end year in the set is 2023.
    """
    return [
        heathrow,
        make_station(
            usaf_id="031660",
            name="EDINBURGH",
            call_sign="EGPH",
            latitude=55.95,
            longitude=-3.37,
            elevation_m=41.0,
            period_end=date(2023, 6, 15),
        ),
        make_station(
            usaf_id="036830",
            name="London City",
            call_sign="EGLC",
            latitude=51.505,
            longitude=0.055,
            elevation_m=5.0,
            period_end=date(2022, 3, 1),
        ),
        make_station(
            usaf_id="725650",
            wban_id="03017",
            name="DENVER INTL",
            country_code="US",
            state_code="CO",
            call_sign="KDEN",
            latitude=39.83,
            longitude=-104.66,
            elevation_m=1650.2,
            period_end=date(2023, 12, 31),
        ),
        make_station(
            usaf_id="720533",
            wban_id="00160",
            name="BOULDER MUNI",
            country_code="US",
            state_code="CO",
            call_sign="KBDU",
            latitude=40.04,
            longitude=-105.23,
            elevation_m=1609.0,
            period_end=date(2016, 8, 1),
        ),
        make_station(
            usaf_id="720999",
            wban_id="99999",
            name="UNLOCATED CO SITE",
            country_code="US",
            state_code="CO",
            call_sign=None,
            latitude=None,
            longitude=None,
            elevation_m=None,
            period_end=date(2023, 1, 1),
        ),
        make_station(
            usaf_id="999001",
            wban_id="99999",
            name="OPEN OCEAN PLATFORM",
            country_code=None,
            call_sign=None,
            latitude=10.0,
            longitude=10.0,
            elevation_m=None,
            period_end=date(2023, 5, 1),
        ),
        make_station(
            usaf_id="037721",
            name="Heathrow North",
            call_sign=None,
            latitude=51.49,
            longitude=-0.46,
            period_end=date(2020, 1, 1),
        ),
    ]


@pytest.fixture
def table(stations: list[StationRecord]) -> StationTable:
    return StationTable(stations)


@pytest.fixture
def registry(stations: list[StationRecord]) -> StationRegistry:
    return StationRegistry.from_records(stations)
