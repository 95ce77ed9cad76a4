# tidbus

tidbus gets the next departures from a bus stop through the NextBuses SIRI
stop-monitoring service. It draws them on a 64×32 canvas with a BDF bitmap
font and encodes the result as a lossless animated WebP. It then either
writes the image to a file or pushes it to a Tidbyt display. Colours are
darkened according to the sun's altitude at a fixed location, which is set
by `LATITUDE` and `LONGITUDE` in `tidbus.colors`. At night the darkening
factor is 0.8.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings come from the environment. The `tidbus` command first loads a
`.env` file if it finds one.

| Variable                | Meaning                                                         |
|-------------------------|-----------------------------------------------------------------|
| `NEXT_BUSES_API_USER`   | NextBuses API user name                                         |
| `NEXT_BUSES_API_PASS`   | NextBuses API password                                          |
| `BUS_STOP_NAPTAN_CODE`  | NaPTAN code of the stop to monitor                              |
| `MINUTES_AWAY`          | Leave out buses due sooner than this many minutes (non-negative)|
| `OUTPUT_TIMEZONE`       | IANA zone for the printed departure times, e.g. `Europe/London` |
| `TIDBYT_ID`             | Device identifier of the Tidbyt                                 |
| `TIDBYT_KEY`            | API key for the Tidbyt push endpoint                            |

Example `.env`:

```
NEXT_BUSES_API_USER=user
NEXT_BUSES_API_PASS=password
BUS_STOP_NAPTAN_CODE=00000000
MINUTES_AWAY=5
OUTPUT_TIMEZONE=Europe/London
TIDBYT_ID=example-device
TIDBYT_KEY=placeholder
```

## Font

The package does not include a font. By default the command reads
`fonts/tb-8.bdf`, relative to the current directory. Use `--font` to give the
path of another BDF file. The font must contain a glyph for every character
that is drawn, or rendering fails with `LookupError`. A space is always
advanced by 2 pixels.

## Usage

Render once and push the image to the display:

```
tidbus
```

Write the image to a file and do not push it:

```
tidbus --debug out.webp
```

Render again every 60 seconds:

```
tidbus --retry 60
```

Use a different font:

```
tidbus --font path/to/font.bdf
```

With `--debug`, the command renders once and exits, even when `--retry` is
also given. On any error it prints `Error: ...` to standard error and exits
with status 1.

## Layout

The display has three rows. Each row shows a line name and its departure
time as `HH:MM` in `OUTPUT_TIMEZONE`. The expected departure time is used
when the service gives one. Otherwise the aimed (scheduled) time is used.

The first three departures that are at least `MINUTES_AWAY` minutes off are
shown. Rendering fails in two cases:

- fewer than three departures qualify;
- the response contains a departure that has already gone.

Pushing prints the response body when the device API does not answer 200.
It prints `Successfully pushed to Tidbyt` when it does.

## Library use

- `tidbus.arrivals.BusArrivalsLookup.from_xml(xml, minutes_away, now)` parses
  a SIRI response into `ExpectedBusArrival` values.
- `tidbus.next_buses.build_request_payload` builds the request document.
  `tidbus.next_buses.get_next_buses` sends it and returns the departures.
- `tidbus.bdf.parse_bdf` and `tidbus.bdf.load_font` read BDF fonts.
- `tidbus.canvas.DrawTarget` is a premultiplied ARGB surface.
  `tidbus.canvas.get_rgba` turns it into RGBA bytes.
- `tidbus.colors.adjusted_color` returns a colour darkened by the sun.
  `tidbus.solar.sun_altitude` gives the sun's altitude in radians.
- `tidbus.widgets` provides the `TextWidget`, `ChartWidget`, `HStack` and
  `VStack` layout widgets.
- `tidbus.render` turns a layout into WebP bytes with:
  - `build_layout`
  - `render_frames`
  - `encode_webp`
  - `render`
- `tidbus.pusher.push` sends an image to the device.

`ChartWidget` is available for library use, but the command's layout does
not use it.