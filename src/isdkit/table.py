"""Immutable station tables passed between pipeline stages."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, overload

from .station import RankedRecord, StationRecord

#: Column names exposed to consumers, in output order.
COLUMNS: tuple[str, ...] = (
    "station_code",
    "usaf_id",
    "wban_id",
    "name",
    "country_code",
    "state_code",
    "call_sign",
    "latitude",
    "longitude",
    "elevation_m",
    "period_start",
    "period_end",
)

DISTANCE_COLUMN = "distance_km"


class StationTable:
    """An ordered, read-only sequence of :class:`StationRecord` rows.

    Every transformation returns a new table; the rows of an existing table
    are never replaced or reordered.

    Example::

        table = StationTable(records)
        uk = table.filter(lambda r: r.country_code == "UK")
    """

    __slots__ = ("_records",)

    _records: tuple[StationRecord, ...]

    def __init__(self, records: Iterable[StationRecord] = ()) -> None:
        self._records = tuple(records)

    # --- Sequence protocol --------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StationRecord]:
        return iter(self._records)

    @overload
    def __getitem__(self, index: int) -> StationRecord: ...

    @overload
    def __getitem__(self, index: slice) -> StationTable: ...

    def __getitem__(self, index: int | slice) -> StationRecord | StationTable:
        if isinstance(index, slice):
            return StationTable(self._records[index])
        return self._records[index]

    def __bool__(self) -> bool:
        return bool(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StationTable):
            return NotImplemented
        return type(self) is type(other) and self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._records)} rows)"

    # --- Access -------------------------------------------------------------

    @property
    def records(self) -> tuple[StationRecord, ...]:
        """All rows, in table order."""
        return self._records

    @property
    def columns(self) -> tuple[str, ...]:
        return COLUMNS

    @property
    def station_codes(self) -> list[str]:
        return [r.station_code for r in self._records]

    def filter(self, predicate: Callable[[StationRecord], bool]) -> StationTable:
        """Return a new table with the rows for which *predicate* is true.

        Row order is preserved.
        """
        return StationTable(r for r in self._records if predicate(r))

    # --- Export -------------------------------------------------------------

    def to_rows(self) -> list[dict[str, Any]]:
        """Return the table as a list of dicts keyed by :attr:`columns`."""
        return [_record_row(r) for r in self._records]

    def to_dataframe(self) -> Any:  # pd.DataFrame — typed as Any for optional dependency
        """Convert the table to a pandas DataFrame.

        Raises:
            ImportError: If pandas is not installed.
        """
        try:
            import pandas
        except ImportError:
            msg = "pandas is required for to_dataframe(). Install with: pip install isdkit[dataframes]"
            raise ImportError(msg) from None

        pd: Any = pandas
        return pd.DataFrame(self.to_rows(), columns=list(self.columns))


class ResultTable(StationTable):
    """Result of a station search.

    When the search was made around a reference point every row carries a
    great-circle distance and the rows are ordered nearest first. Otherwise
    :attr:`distances` is ``None`` and the rows keep their registry order.
    """

    __slots__ = ("_distances",)

    _distances: tuple[float, ...] | None

    def __init__(
        self,
        records: Iterable[StationRecord] = (),
        distances: Iterable[float] | None = None,
    ) -> None:
        super().__init__(records)
        if distances is None:
            self._distances = None
        else:
            self._distances = tuple(distances)
            if len(self._distances) != len(self._records):
                msg = f"Got {len(self._distances)} distances for {len(self._records)} records"
                raise ValueError(msg)

    @classmethod
    def from_ranked(cls, ranked: Iterable[RankedRecord]) -> ResultTable:
        """Build a distance-carrying table from ranked records."""
        items = list(ranked)
        return cls((r.station for r in items), (r.distance_km for r in items))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResultTable):
            return NotImplemented
        return self._records == other._records and self._distances == other._distances

    def __hash__(self) -> int:
        return hash((self._records, self._distances))

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            distances = self._distances[index] if self._distances is not None else None
            return ResultTable(self._records[index], distances)
        return self._records[index]

    @property
    def distances(self) -> tuple[float, ...] | None:
        """Distance in km for each row, or ``None`` for unranked results."""
        return self._distances

    @property
    def is_ranked(self) -> bool:
        return self._distances is not None

    @property
    def ranked(self) -> list[RankedRecord]:
        """Rows paired with their distances.

        Raises:
            ValueError: If the result was not ranked by distance.
        """
        if self._distances is None:
            msg = "Result was not ranked; search with a latitude and longitude to get distances"
            raise ValueError(msg)
        return [RankedRecord(station=s, distance_km=d) for s, d in zip(self._records, self._distances)]

    @property
    def columns(self) -> tuple[str, ...]:
        if self._distances is None:
            return COLUMNS
        return (*COLUMNS, DISTANCE_COLUMN)

    def to_rows(self) -> list[dict[str, Any]]:
        rows = super().to_rows()
        if self._distances is not None:
            for row, dist in zip(rows, self._distances):
                row[DISTANCE_COLUMN] = dist
        return rows


def _record_row(record: StationRecord) -> dict[str, Any]:
    return {
        "station_code": record.station_code,
        "usaf_id": record.usaf_id,
        "wban_id": record.wban_id,
        "name": record.name,
        "country_code": record.country_code,
        "state_code": record.state_code,
        "call_sign": record.call_sign,
        "latitude": record.latitude,
        "longitude": record.longitude,
        "elevation_m": record.elevation_m,
        "period_start": record.period_start,
        "period_end": record.period_end,
    }
