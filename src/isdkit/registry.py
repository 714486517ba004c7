"""Acquire and cache the NOAA ISD station history.

The registry is published as ``isd-history.csv`` with one row per station::

    "USAF","WBAN","STATION NAME","CTRY","STATE","ICAO","LAT","LON","ELEV(M)","BEGIN","END"
    "037720","99999","HEATHROW","UK","","EGLL","+51.478","-000.461","+0025.3","19730101","20240316"

:class:`StationRegistry` downloads it, keeps a compressed local copy, and
hands the parsed :class:`~isdkit.table.StationTable` to the search engine.
"""

from __future__ import annotations

import csv
import gzip
import io
import json
import logging
import math
import os
import sys
from collections.abc import Iterable
from datetime import date, datetime, timezone
from http.client import HTTPException
from pathlib import Path
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .engine import search
from .exceptions import SourceUnavailableError
from .query import StationQuery
from .station import StationRecord
from .table import ResultTable, StationTable

logger = logging.getLogger(__name__)

REGISTRY_URL = "https://www.ncei.noaa.gov/pub/data/noaa/isd-history.csv"

_USER_AGENT = "isdkit (https://pypi.org/project/isdkit/)"
_CACHED_REGISTRY = "isd-history.json.gz"

#: Column layout of ``isd-history.csv``.
REGISTRY_COLUMNS: tuple[str, ...] = (
    "USAF",
    "WBAN",
    "STATION NAME",
    "CTRY",
    "STATE",
    "ICAO",
    "LAT",
    "LON",
    "ELEV(M)",
    "BEGIN",
    "END",
)


def default_cache_dir() -> Path:
    """Return the cache directory for isdkit registry data.

    ``ISDKIT_CACHE_DIR`` takes precedence over the platform default.
    """
    override = os.environ.get("ISDKIT_CACHE_DIR")
    if override:
        return Path(override)
    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "isdkit" / "cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / "isdkit"
    xdg = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".cache"
    return base / "isdkit"


def registry_url() -> str:
    """Return the registry URL, honouring ``ISDKIT_REGISTRY_URL``."""
    return os.environ.get("ISDKIT_REGISTRY_URL") or REGISTRY_URL


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _text(value: str) -> str | None:
    value = value.strip()
    return value or None


def _float(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _date(value: str) -> date | None:
    try:
        return datetime.strptime(value.strip(), "%Y%m%d").date()
    except ValueError:
        return None


def _parse_row(row: list[str]) -> StationRecord:
    usaf, wban, name, ctry, state, icao, lat, lon, elev, begin, end = row
    return StationRecord(
        usaf_id=usaf.strip().zfill(6),
        wban_id=wban.strip(),
        name=name.strip(),
        country_code=_text(ctry),
        state_code=_text(state),
        call_sign=_text(icao),
        latitude=_float(lat),
        longitude=_float(lon),
        elevation_m=_float(elev),
        period_start=_date(begin),
        period_end=_date(end),
    )


def parse_registry(text: str, *, url: str | None = None) -> StationTable:
    """Parse the contents of ``isd-history.csv`` into a station table.

    Lines before the ``"USAF"`` header row are ignored. If no header is
    present every non-blank line is read as data.

    Args:
        text: The CSV document.
        url: Where *text* came from, for error messages.

    Raises:
        SourceUnavailableError: If any row does not have the expected eleven
            columns (typically an error page returned in place of the file)
            or the document holds no stations.
    """
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    for i, row in enumerate(rows):
        if row[0].strip().upper() == REGISTRY_COLUMNS[0]:
            rows = rows[i + 1 :]
            break

    expected = len(REGISTRY_COLUMNS)
    records: list[StationRecord] = []
    for line_no, row in enumerate(rows, 1):
        if len(row) != expected:
            reason = f"expected {expected} columns, got {len(row)} in data row {line_no}"
            raise SourceUnavailableError(reason, url=url)
        records.append(_parse_row(row))

    if not records:
        raise SourceUnavailableError("no station rows found", url=url)
    return StationTable(records)


def fetch_registry(url: str | None = None, *, timeout: float = 60) -> tuple[StationTable, str | None]:
    """Download and parse the station registry.

    Failures are reported, never retried.

    Returns ``(table, last_modified_header)``.

    Raises:
        SourceUnavailableError: If the download fails or the body is not a
            well-formed registry.
    """
    url = url or registry_url()
    logger.debug("Downloading station registry from %s", url)
    req = Request(url, headers={"User-Agent": _USER_AGENT})  # noqa: S310
    try:
        with urlopen(req, timeout=timeout) as resp:  # noqa: S310
            last_modified: str | None = resp.headers.get("Last-Modified")
            body: bytes = resp.read()
    except (HTTPError, URLError, HTTPException, TimeoutError, OSError) as exc:
        raise SourceUnavailableError(str(exc), url=url) from exc

    table = parse_registry(body.decode("utf-8", errors="replace"), url=url)
    logger.debug("Parsed %d stations from %s", len(table), url)
    return table, last_modified


def _head_last_modified(url: str) -> str | None:
    """Send a HEAD request and return the ``Last-Modified`` header, or ``None``."""
    req = Request(url, method="HEAD", headers={"User-Agent": _USER_AGENT})  # noqa: S310
    try:
        with urlopen(req, timeout=30) as resp:  # noqa: S310
            return resp.headers.get("Last-Modified")
    except (HTTPError, URLError, HTTPException, TimeoutError, OSError):
        return None


# ---------------------------------------------------------------------------
# Compressed cache
# ---------------------------------------------------------------------------


def _load_compressed_registry(path: Path) -> tuple[StationTable, dict[str, Any]]:
    """Load a gzip-compressed JSON registry.

    Returns ``(table, metadata)`` where metadata holds ``url``,
    ``last_modified`` and ``built_at``.
    """
    with gzip.open(path, "rt", encoding="utf-8") as f:
        data: dict[str, Any] = json.load(f)
    table = StationTable(StationRecord.from_dict(d) for d in data["stations"])
    meta = {k: data.get(k) for k in ("url", "last_modified", "built_at")}
    return table, meta


def _save_compressed_registry(
    table: StationTable,
    dest: Path,
    *,
    url: str | None = None,
    last_modified: str | None = None,
) -> None:
    """Serialize a registry table and its provenance to gzip-compressed JSON."""
    data = {
        "built_at": datetime.now(tz=timezone.utc).isoformat(),
        "url": url,
        "last_modified": last_modified,
        "stations": [r.to_dict() for r in table],
    }
    dest.parent.mkdir(parents=True, exist_ok=True)
    with gzip.open(dest, "wt", encoding="utf-8") as f:
        json.dump(data, f, separators=(",", ":"))


# ---------------------------------------------------------------------------
# StationRegistry
# ---------------------------------------------------------------------------


class StationRegistry:
    """The ISD station history, ready to search.

    Use :meth:`fetch` for a fresh copy with an optional fallback, :meth:`load`
    to read the copy cached by the last successful download, or
    :meth:`from_records` to build one in memory.

    Example::

        registry = StationRegistry.fetch()
        result = registry.search(name="heathrow")
        print(result.station_codes)
    """

    __slots__ = ("_by_code", "_last_modified", "_table", "_url")

    _table: StationTable
    _by_code: dict[str, StationRecord]
    _last_modified: str | None
    _url: str | None

    def __init__(
        self,
        table: StationTable,
        *,
        url: str | None = None,
        last_modified: str | None = None,
    ) -> None:
        self._table = table
        self._by_code = {r.station_code: r for r in table}
        self._url = url
        self._last_modified = last_modified

    # --- Construction -------------------------------------------------------

    @classmethod
    def from_records(cls, records: Iterable[StationRecord]) -> StationRegistry:
        """Create a registry from explicit records (useful for tests)."""
        return cls(StationTable(records))

    @classmethod
    def load(cls, *, cache_dir: Path | None = None) -> StationRegistry:
        """Load the registry cached by the last :meth:`refresh`.

        No network access is made.

        Raises:
            FileNotFoundError: If nothing has been cached yet.
        """
        path = (cache_dir or default_cache_dir()) / _CACHED_REGISTRY
        if not path.is_file():
            msg = f"No cached station registry at {path}. Run StationRegistry.refresh() to download one."
            raise FileNotFoundError(msg)
        table, meta = _load_compressed_registry(path)
        logger.debug("Loaded %d stations from %s", len(table), path)
        return cls(table, url=meta["url"], last_modified=meta["last_modified"])

    @classmethod
    def refresh(cls, *, cache_dir: Path | None = None, url: str | None = None) -> StationRegistry:
        """Download the registry and replace the local cached copy.

        Raises:
            SourceUnavailableError: If the registry cannot be downloaded or
                is malformed. The cache is left untouched.
        """
        url = url or registry_url()
        table, last_modified = fetch_registry(url)
        dest = (cache_dir or default_cache_dir()) / _CACHED_REGISTRY
        _save_compressed_registry(table, dest, url=url, last_modified=last_modified)
        logger.debug("Cached %d stations at %s", len(table), dest)
        return cls(table, url=url, last_modified=last_modified)

    @classmethod
    def fetch(
        cls,
        *,
        cache_dir: Path | None = None,
        url: str | None = None,
        fallback: StationRegistry | StationTable | None = None,
    ) -> StationRegistry:
        """Download a fresh registry, falling back to *fallback* on failure.

        Args:
            cache_dir: Override the default cache directory.
            url: Override the registry URL.
            fallback: Registry (or table) to use when the download fails,
                for example ``StationRegistry.load()``.

        Raises:
            SourceUnavailableError: If the download fails and no fallback was
                given.
        """
        try:
            return cls.refresh(cache_dir=cache_dir, url=url)
        except SourceUnavailableError as exc:
            if fallback is None:
                raise
            logger.warning("%s\nUsing fallback station registry instead.", exc)
            if isinstance(fallback, StationTable):
                return cls(fallback)
            return fallback

    # --- Freshness ----------------------------------------------------------

    def check_for_updates(self) -> bool:
        """Check if the upstream registry changed since this copy was downloaded.

        Returns ``False`` when provenance is unknown or the check fails.
        """
        if not self._url or not self._last_modified:
            return False
        upstream = _head_last_modified(self._url)
        return upstream is not None and upstream != self._last_modified

    # --- Properties ---------------------------------------------------------

    @property
    def table(self) -> StationTable:
        """All stations, in registry order."""
        return self._table

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def last_modified(self) -> str | None:
        return self._last_modified

    @property
    def countries(self) -> list[str]:
        """Sorted list of unique country codes in the registry."""
        return sorted({r.country_code for r in self._table if r.country_code})

    def __len__(self) -> int:
        return len(self._table)

    # --- Lookup -------------------------------------------------------------

    def get_by_code(self, code: str) -> StationRecord | None:
        """Look up a station by its ``USAF-WBAN`` code."""
        return self._by_code.get(code)

    def search(self, query: StationQuery | None = None, **criteria: Any) -> ResultTable:
        """Search the registry. See :func:`isdkit.engine.search`."""
        return search(self._table, query, **criteria)
