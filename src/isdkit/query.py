"""Search criteria and end-year selector resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from numbers import Integral
from typing import Union

from .exceptions import InvalidArgumentError
from .table import StationTable

#: Accepted forms of the end-year selector.
EndYear = Union[str, int, Iterable[int]]

CURRENT = "current"
ALL = "all"

#: Year window selected by ``end_year="all"``.
ALL_YEARS: frozenset[int] = frozenset(range(1900, 2101))

DEFAULT_N = 10

_END_YEAR_EXPECTED = "'current', 'all', a numeric 4-digit year such as 2016, or a collection of years"


@dataclass(frozen=True)
class StationQuery:
    """Criteria for a station search.

    All criteria are optional and combine with logical AND.

    Attributes:
        name: Case-insensitive substring of the station name
            (e.g. ``"heathr"``).
        country: Two-letter country code, any case.
        state: Two-letter state code, any case.
        latitude: Latitude of the search location, -90 to 90.
        longitude: Longitude of the search location, -180 to 180.
            Negative numbers are west of the Greenwich meridian.
        n: Number of nearest stations to keep when searching around a
            location.
        end_year: ``"current"`` keeps stations whose data ends in the most
            recent year of the registry, ``"all"`` keeps every station, and
            a year (``2016``) or collection of years (``range(1990, 2017)``)
            keeps stations whose data ends in one of those years.
    """

    name: str | None = None
    country: str | None = None
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    n: int = DEFAULT_N
    end_year: EndYear = CURRENT

    def __post_init__(self) -> None:
        # Freeze iterators and ranges so the selector can be resolved twice.
        if isinstance(self.end_year, Iterable) and not isinstance(self.end_year, (str, bytes, dict)):
            object.__setattr__(self, "end_year", tuple(self.end_year))

    @property
    def reference_point(self) -> tuple[float, float] | None:
        """``(latitude, longitude)`` of the search location, if one was given."""
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)

    def validate(self) -> None:
        """Check the criteria without looking at any station data.

        Raises:
            InvalidArgumentError: If the end-year selector is malformed, *n*
                is not a positive integer, or only one of latitude and
                longitude was supplied.
        """
        resolve_end_years(self.end_year, StationTable())
        if not _is_year(self.n) or self.n < 1:
            raise InvalidArgumentError("n", self.n, "a positive integer")
        if (self.latitude is None) != (self.longitude is None):
            raise InvalidArgumentError(
                "latitude" if self.latitude is None else "longitude",
                None,
                "both latitude and longitude, or neither",
            )


def _is_year(value: object) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def resolve_end_years(end_year: EndYear, table: StationTable) -> frozenset[int]:
    """Resolve an end-year selector to the set of years it accepts.

    ``"current"`` is resolved against every row of *table*, so pass the
    unfiltered registry rather than an already narrowed subset.

    Raises:
        InvalidArgumentError: If *end_year* is not one of the accepted forms.
    """
    if isinstance(end_year, str):
        key = end_year.strip().lower()
        if key == CURRENT:
            years = [r.period_end.year for r in table if r.period_end is not None]
            return frozenset([max(years)]) if years else frozenset()
        if key == ALL:
            return ALL_YEARS
        raise InvalidArgumentError("end_year", end_year, _END_YEAR_EXPECTED)

    if _is_year(end_year):
        return frozenset([int(end_year)])  # type: ignore[arg-type]

    if isinstance(end_year, Iterable) and not isinstance(end_year, (bytes, dict)):
        years = list(end_year)
        if years and all(_is_year(y) for y in years):
            return frozenset(int(y) for y in years)

    raise InvalidArgumentError("end_year", end_year, _END_YEAR_EXPECTED)
