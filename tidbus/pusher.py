"""Pushing a rendered image to a display device."""

from __future__ import annotations

import base64
import os

import requests

API_HOST = "api.tidbyt.com"
USER_AGENT = "tidbyt"
INSTALLATION_ID = "custom"
_ENV_NAMES = ("TIDBYT_ID", "TIDBYT_KEY")


class PushConfigError(RuntimeError):
    """Raised when the device id or key is not configured."""


def build_payload(file_contents: bytes, device_id: str) -> dict[str, object]:
    """The JSON body for a push request."""
    return {
        "deviceID": device_id,
        "installationID": INSTALLATION_ID,
        "image": base64.b64encode(bytes(file_contents)).decode("ascii"),
        "background": True,
    }


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise PushConfigError(f"Missing {name}")
    return value


def push(file_contents: bytes) -> bool:
    """Send the image to the device named by TIDBYT_ID using TIDBYT_KEY."""
    device_id, bearer = (_require_env(name) for name in _ENV_NAMES)
    endpoint = f"https://{API_HOST}/v0/devices/{device_id}/push"

    response = requests.post(
        endpoint,
        json=build_payload(file_contents, device_id),
        headers={"Authorization": f"Bearer {bearer}", "User-Agent": USER_AGENT},
        timeout=30,
    )

    if response.status_code != 200:
        print(repr(response.text))
    else:
        print("Successfully pushed to Tidbyt")
    return True