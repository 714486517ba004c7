"""Station filter engine: narrow and rank a station table for a query.

The search runs as a fixed sequence of pure stages. Each stage takes a
:class:`~isdkit.table.StationTable` and returns a new one, so any prefix of
the pipeline can be run and inspected on its own:

1. resolve the end-year selector against the full table
2. :func:`filter_name`
3. :func:`filter_country`
4. :func:`filter_state`
5. :func:`drop_missing_coordinates`
6. :func:`filter_end_years`
7. :func:`rank_by_distance` (only when a search location is given)

Example::

    from isdkit import StationQuery, search

    result = search(table, StationQuery(latitude=51.5, longitude=-0.1, n=3))
    for r in result.ranked:
        print(f"{r.station.name}: {r.distance_km:.0f} km")
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Any

from .query import DEFAULT_N, StationQuery, resolve_end_years
from .spatial import great_circle_km
from .station import RankedRecord
from .table import ResultTable, StationTable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def filter_name(table: StationTable, name: str | None) -> StationTable:
    """Keep stations whose name contains *name*, ignoring case."""
    if name is None:
        return table
    needle = name.lower()
    return table.filter(lambda r: needle in r.name.lower())


def filter_country(table: StationTable, country: str | None) -> StationTable:
    """Keep stations in *country*. Stations without a country never match."""
    if country is None:
        return table
    code = country.strip().upper()
    return table.filter(lambda r: r.country_code is not None and r.country_code.upper() == code)


def filter_state(table: StationTable, state: str | None) -> StationTable:
    """Keep stations in *state*. Stations without a state never match."""
    if state is None:
        return table
    code = state.strip().upper()
    return table.filter(lambda r: r.state_code is not None and r.state_code.upper() == code)


def drop_missing_coordinates(table: StationTable) -> StationTable:
    """Drop stations lacking a latitude or a longitude."""
    return table.filter(lambda r: r.has_coordinates)


def filter_end_years(table: StationTable, years: Collection[int]) -> StationTable:
    """Keep stations whose last data date falls in one of *years*."""
    return table.filter(lambda r: r.period_end is not None and r.period_end.year in years)


def rank_by_distance(
    table: StationTable,
    latitude: float,
    longitude: float,
    *,
    n: int = DEFAULT_N,
) -> list[RankedRecord]:
    """Return the *n* stations nearest to a location, nearest first.

    Ties keep table order. Every station in *table* must have coordinates
    (see :func:`drop_missing_coordinates`).
    """
    ranked = [
        RankedRecord(
            station=r,
            distance_km=great_circle_km(latitude, longitude, r.latitude, r.longitude),  # type: ignore[arg-type]
        )
        for r in table
    ]
    ranked.sort(key=lambda r: r.distance_km)
    return ranked[:n]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def search(table: StationTable, query: StationQuery | None = None, **criteria: Any) -> ResultTable:
    """Filter *table* by *query* and, given a location, rank by distance.

    Criteria may be passed as a :class:`~isdkit.query.StationQuery` or as
    its fields in keyword form (``search(table, name="heathrow")``), not
    both. *table* is never modified.

    Args:
        table: The full station registry.
        query: Search criteria.
        **criteria: Fields of :class:`~isdkit.query.StationQuery`.

    Returns:
        A :class:`~isdkit.table.ResultTable`. Without a location it holds the
        matching stations in registry order; with one it holds at most
        ``query.n`` stations, nearest first, with their distances. A search
        that matches nothing returns an empty table.

    Raises:
        InvalidArgumentError: If the end-year selector, ``n`` or the
            location is malformed. Raised before any filtering.
        TypeError: If both *query* and keyword criteria are given.
    """
    if query is None:
        query = StationQuery(**criteria)
    elif criteria:
        msg = "Pass either a StationQuery or keyword criteria, not both"
        raise TypeError(msg)

    query.validate()
    years = resolve_end_years(query.end_year, table)

    working = filter_name(table, query.name)
    working = filter_country(working, query.country)
    working = filter_state(working, query.state)
    working = drop_missing_coordinates(working)
    working = filter_end_years(working, years)
    logger.debug("Query %r matched %d of %d stations", query, len(working), len(table))

    point = query.reference_point
    if point is None:
        return ResultTable(working)
    return ResultTable.from_ranked(rank_by_distance(working, *point, n=query.n))
