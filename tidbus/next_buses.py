"""Fetching upcoming departures from the stop-monitoring service."""

from __future__ import annotations

import os
from datetime import datetime
from xml.sax.saxutils import escape

import requests

from tidbus.arrivals import BusArrivalsLookup, ExpectedBusArrival

API_URL = "http://nextbus.mxdata.co.uk/nextbuses/1.0/1"
USER_AGENT = "tidbyt"
MESSAGE_IDENTIFIER = "garbage"
USER_VAR = "NEXT_BUSES_API_USER"
PASS_VAR = "NEXT_BUSES_API_PASS"
STOP_VAR = "BUS_STOP_NAPTAN_CODE"

_PAYLOAD_TEMPLATE = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Siri version="1.0" xmlns="http://www.siri.org.uk/">
<ServiceRequest>
<RequestTimestamp>{timestamp}</RequestTimestamp>
<RequestorRef>{requestor}</RequestorRef>
<StopMonitoringRequest version="1.0">
<RequestTimestamp>{timestamp}</RequestTimestamp>
<MessageIdentifier>{message}</MessageIdentifier>
<MonitoringRef>{stop}</MonitoringRef>
</StopMonitoringRequest>
</ServiceRequest>
</Siri>"""


class NextBusesConfigError(RuntimeError):
    """Raised when the service credentials or stop code are not configured."""


def _format_rfc3339(moment: datetime) -> str:
    aware = moment if moment.utcoffset() is not None else moment.astimezone()
    micros = aware.microsecond
    if micros == 0:
        fraction = ""
    elif micros % 1000 == 0:
        fraction = f".{micros // 1000:03d}"
    else:
        fraction = f".{micros:06d}"
    offset = aware.utcoffset()
    total_minutes = int(offset.total_seconds()) // 60
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{aware.strftime('%Y-%m-%dT%H:%M:%S')}{fraction}{sign}{hours:02d}:{minutes:02d}"


def build_request_payload(
    api_user: str, bus_stop_code: str, now: datetime | None = None
) -> str:
    """The stop-monitoring request document for ``bus_stop_code`` at ``now``."""
    moment = now if now is not None else datetime.now().astimezone()
    return _PAYLOAD_TEMPLATE.format(
        timestamp=_format_rfc3339(moment),
        requestor=escape(api_user),
        message=MESSAGE_IDENTIFIER,
        stop=escape(bus_stop_code),
    )


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise NextBusesConfigError(f"{name} is not set")
    return value


def get_next_buses() -> list[ExpectedBusArrival]:
    """Ask the service for the configured stop and return the next departures."""
    api_user = _require_env(USER_VAR)
    api_pass = _require_env(PASS_VAR)
    bus_stop_code = _require_env(STOP_VAR)

    response = requests.post(
        API_URL,
        data=build_request_payload(api_user, bus_stop_code).encode("utf-8"),
        headers={"User-Agent": USER_AGENT},
        auth=(api_user, api_pass),
        timeout=30,
    )
    response.raise_for_status()
    return list(BusArrivalsLookup.from_xml(response.text).arrivals)