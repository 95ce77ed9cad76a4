from datetime import datetime, timedelta, timezone

import pytest
import responses
from PIL import Image

from tidbus.cli import main, parse_args
from tidbus.next_buses import API_URL
from tidbus.render import DEFAULT_FONT_PATH

CHARS = "0123456789:AX"


def _font_text() -> str:
    parts = ["STARTFONT 2.1", "FONT test", "SIZE 8 75 75", f"CHARS {len(CHARS)}"]
    for char in CHARS:
        parts += [
            f"STARTCHAR c{ord(char)}",
            f"ENCODING {ord(char)}",
            "DWIDTH 4 0",
            "BBX 3 5 0 0",
            "BITMAP",
            *["E0"] * 5,
            "ENDCHAR",
        ]
    parts.append("ENDFONT")
    return "\n".join(parts) + "\n"


def _response_xml(now: datetime) -> str:
    visits = []
    for index, line in enumerate(["17", "61", "60A"]):
        moment = (now + timedelta(minutes=10 * (index + 1))).astimezone(timezone.utc)
        stamp = moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")
        visits.append(
            "<MonitoredStopVisit><MonitoredVehicleJourney>"
            f"<PublishedLineName>{line}</PublishedLineName>"
            f"<MonitoredCall><ExpectedDepartureTime>{stamp}</ExpectedDepartureTime>"
            "</MonitoredCall></MonitoredVehicleJourney></MonitoredStopVisit>"
        )
    return "<Siri><ServiceDelivery>" + "".join(visits) + "</ServiceDelivery></Siri>"


def test_parse_args_defaults():
    args = parse_args([])
    assert args.debug is None
    assert args.retry is None
    assert args.font_path == DEFAULT_FONT_PATH


def test_parse_args_options():
    args = parse_args(["--debug", "out.webp", "--retry", "30", "--font", "f.bdf"])
    assert (args.debug, args.retry, args.font_path) == ("out.webp", 30, "f.bdf")


def test_parse_args_short_options():
    args = parse_args(["-d", "x.webp", "-r", "5"])
    assert (args.debug, args.retry) == ("x.webp", 5)


@pytest.mark.parametrize("value", ["-1", "soon"])
def test_parse_args_rejects_bad_retry(value):
    with pytest.raises(SystemExit):
        parse_args(["--retry", value])


def test_main_fails_without_timezone(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OUTPUT_TIMEZONE", raising=False)
    assert main(["--debug", str(tmp_path / "out.webp")]) == 1
    assert not (tmp_path / "out.webp").exists()


def test_main_writes_debug_file_once(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    font_path = tmp_path / "font.bdf"
    font_path.write_text(_font_text(), encoding="latin-1")
    monkeypatch.setenv("OUTPUT_TIMEZONE", "UTC")
    monkeypatch.setenv("NEXT_BUSES_API_USER", "user")
    monkeypatch.setenv("NEXT_BUSES_API_PASS", "password")
    monkeypatch.setenv("BUS_STOP_NAPTAN_CODE", "stop-code")
    monkeypatch.setenv("MINUTES_AWAY", "0")
    out = tmp_path / "out.webp"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.POST, API_URL, body=_response_xml(datetime.now(timezone.utc)))
        code = main(["--debug", str(out), "--retry", "1", "--font", str(font_path)])
        assert len(rsps.calls) == 1
    assert code == 0
    with Image.open(out) as image:
        assert image.size == (64, 32)