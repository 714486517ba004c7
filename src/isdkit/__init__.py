"""
isdkit: find NOAA Integrated Surface Database weather stations.

Search the ~30,000 station ISD registry by name, country, state, or
proximity to a location, and get back the ``USAF-WBAN`` station codes used
to request hourly data.

Basic usage:
    from isdkit import StationRegistry

    registry = StationRegistry.fetch()

    # Partial, case-insensitive name search
    result = registry.search(name="heathr")

    # The ten stations nearest Beijing airport still reporting this year
    result = registry.search(latitude=40.0, longitude=116.9)
    for r in result.ranked:
        print(r.station.station_code, r.station.name, round(r.distance_km, 1))

    # Everything in Colorado with data ending between 1990 and 2016
    result = registry.search(country="us", state="co", end_year=range(1990, 2017))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

__version__ = "0.1.0"

from .engine import (
    drop_missing_coordinates,
    filter_country,
    filter_end_years,
    filter_name,
    filter_state,
    rank_by_distance,
    search,
)
from .exceptions import InvalidArgumentError, IsdKitError, SourceUnavailableError
from .query import DEFAULT_N, EndYear, StationQuery, resolve_end_years
from .registry import StationRegistry, fetch_registry, parse_registry
from .spatial import great_circle_km
from .station import RankedRecord, StationRecord
from .table import ResultTable, StationTable

__all__ = [
    "EndYear",
    "InvalidArgumentError",
    "IsdKitError",
    "RankedRecord",
    "ResultTable",
    "SourceUnavailableError",
    "StationQuery",
    "StationRecord",
    "StationRegistry",
    "StationTable",
    "__version__",
    "drop_missing_coordinates",
    "fetch_registry",
    "filter_country",
    "filter_end_years",
    "filter_name",
    "filter_state",
    "get_meta",
    "great_circle_km",
    "parse_registry",
    "rank_by_distance",
    "resolve_end_years",
    "search",
]

logger = logging.getLogger(__name__)


def get_meta(
    name: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    country: str | None = None,
    state: str | None = None,
    n: int = DEFAULT_N,
    end_year: EndYear = "current",
    *,
    registry: StationRegistry | None = None,
    fallback: StationRegistry | StationTable | None = None,
    cache_dir: Path | None = None,
    plot: bool = False,
    return_map: bool = False,
) -> Any:
    """Find ISD stations and their codes in one call.

    Downloads the registry unless *registry* is given. If the download
    fails the search runs against *fallback*, or else against the copy
    cached by the last successful download.

    Args:
        name: Partial station name, any case (e.g. ``"HEATHR"``).
        latitude: Latitude of a search location, -90 to 90.
        longitude: Longitude of a search location, -180 to 180.
        country: Two-letter country code.
        state: Two-letter state code.
        n: Number of nearest stations returned for a location search.
        end_year: ``"current"``, ``"all"``, a year, or a collection of years.
        registry: Registry to search instead of downloading one.
        fallback: Registry (or table) to search when the download fails.
        cache_dir: Cache directory used when downloading.
        plot: Build an interactive map of the result (requires plotly).
        return_map: Return the map instead of the result table. Implies
            *plot*.

    Returns:
        A :class:`ResultTable`, or a plotly Figure when *return_map* is set.

    Raises:
        InvalidArgumentError: If the criteria are malformed.
        SourceUnavailableError: If the registry has to be downloaded,
            cannot be, and there is neither a fallback nor a cached copy.
    """
    query = StationQuery(
        name=name,
        country=country,
        state=state,
        latitude=latitude,
        longitude=longitude,
        n=n,
        end_year=end_year,
    )
    query.validate()
    if registry is None:
        try:
            registry = StationRegistry.fetch(cache_dir=cache_dir, fallback=fallback)
        except SourceUnavailableError as exc:
            try:
                registry = StationRegistry.load(cache_dir=cache_dir)
            except FileNotFoundError:
                raise exc from exc.__cause__
            logger.warning("%s\nUsing cached station registry instead.", exc)
    result = registry.search(query)

    if plot or return_map:
        from .mapping import render

        fig = render(result, query.reference_point)
        if return_map:
            return fig
        fig.show()
    return result
