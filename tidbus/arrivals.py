"""Parsing stop-monitoring responses into upcoming bus departures."""

from __future__ import annotations

import os
import re
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

VISIT_TAG = "MonitoredStopVisit"
LINE_TAG = "PublishedLineName"
EXPECTED_TAG = "ExpectedDepartureTime"
AIMED_TAG = "AimedDepartureTime"
MINUTES_AWAY_VAR = "MINUTES_AWAY"
MAX_ARRIVALS = 3

_RFC3339 = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt ]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})"
)


class ArrivalParseError(ValueError):
    """Raised when a response cannot be turned into arrivals."""


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp that carries an explicit offset."""
    match = _RFC3339.fullmatch(text.strip())
    if match is None:
        raise ArrivalParseError(f"invalid RFC 3339 timestamp: {text!r}")
    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = match["offset"]
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        return datetime.fromisoformat(
            f"{match['date']}T{match['time']}.{fraction}{offset}"
        )
    except ValueError as exc:
        raise ArrivalParseError(f"invalid RFC 3339 timestamp: {text!r}") from exc


def _whole_minutes(delta: timedelta) -> int:
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    minutes = abs(micros) // 60_000_000
    return -minutes if micros < 0 else minutes


@dataclass(frozen=True)
class ExpectedBusArrival:
    """A departure of one line from the monitored stop."""

    line: str
    expected_time: datetime

    @classmethod
    def from_element(cls, element: ET.Element) -> ExpectedBusArrival:
        """Build an arrival from a MonitoredStopVisit element.

        The expected departure time is used when present, the aimed one otherwise.
        """
        line: str | None = None
        expected: datetime | None = None
        aimed: datetime | None = None

        for child in element.iter():
            if child is element:
                continue
            name = _local_name(child.tag)
            text = (child.text or "").strip()
            if name == LINE_TAG:
                line = text
            elif name == EXPECTED_TAG:
                expected = parse_rfc3339(text)
            elif name == AIMED_TAG:
                aimed = parse_rfc3339(text)

        when = expected if expected is not None else aimed
        if line is None or when is None:
            raise ArrivalParseError("did not parse")
        return cls(line=line, expected_time=when)

    def minutes_from_now(self, now: datetime | None = None) -> int:
        """Whole minutes until departure; raises if the bus has already gone."""
        moment = now if now is not None else datetime.now(timezone.utc)
        minutes = _whole_minutes(self.expected_time - moment)
        if minutes < 0:
            raise ArrivalParseError(
                f"departure of line {self.line} is {-minutes} minutes in the past"
            )
        return minutes


def _visits(element: ET.Element) -> Iterator[ET.Element]:
    for child in element:
        if _local_name(child.tag) == VISIT_TAG:
            yield child
        else:
            yield from _visits(child)


def _minutes_away_from_env() -> int:
    raw = os.environ.get(MINUTES_AWAY_VAR)
    if raw is None:
        raise ArrivalParseError(f"{MINUTES_AWAY_VAR} is not set")
    try:
        value = int(raw)
    except ValueError as exc:
        raise ArrivalParseError(f"{MINUTES_AWAY_VAR} is not a number: {raw!r}") from exc
    if value < 0:
        raise ArrivalParseError(f"{MINUTES_AWAY_VAR} must not be negative: {raw!r}")
    return value


@dataclass
class BusArrivalsLookup:
    """The next few departures far enough away to be caught."""

    arrivals: list[ExpectedBusArrival] = field(default_factory=list)

    @classmethod
    def from_xml(
        cls,
        xml: str,
        minutes_away: int | None = None,
        now: datetime | None = None,
    ) -> BusArrivalsLookup:
        """Parse a response, keeping the first three departures at least
        ``minutes_away`` minutes from ``now``.

        ``minutes_away`` defaults to the MINUTES_AWAY environment variable.
        """
        try:
            root = ET.fromstring(xml.strip())
        except ET.ParseError as exc:
            raise ArrivalParseError(f"malformed response: {exc}") from exc

        candidates = [root] if _local_name(root.tag) == VISIT_TAG else list(_visits(root))
        parsed = [ExpectedBusArrival.from_element(visit) for visit in candidates]

        threshold = minutes_away if minutes_away is not None else _minutes_away_from_env()
        moment = now if now is not None else datetime.now(timezone.utc)

        selected: list[ExpectedBusArrival] = []
        for arrival in parsed:
            if len(selected) == MAX_ARRIVALS:
                break
            if arrival.minutes_from_now(moment) >= threshold:
                selected.append(arrival)
        return cls(arrivals=selected)