"""Send a host signal to the running overlay server.

Usage: uv run python bin/send-signal.py show|hide|notify|wake
       uv run python bin/send-signal.py sleep <minutes>

Meant for shell hooks around long-running commands, e.g. `show` when a build
starts and `notify` when it finishes. The server address comes from
MINIGAME_HOST / MINIGAME_PORT.
"""

import os
import sys

import httpx

_SIGNALS = {"show", "hide", "notify", "sleep", "wake"}
_TIMEOUT_SECONDS = 2.0


def _usage() -> None:
    print(f"Usage: {sys.argv[0]} show|hide|notify|wake")
    print(f"       {sys.argv[0]} sleep <minutes>")
    sys.exit(1)


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in _SIGNALS:
        _usage()

    body: dict[str, object] = {"signal": sys.argv[1]}
    if sys.argv[1] == "sleep":
        if len(sys.argv) != 3 or not sys.argv[2].isdigit():
            _usage()
        body["minutes"] = int(sys.argv[2])

    host = os.environ.get("MINIGAME_HOST", "127.0.0.1")
    port = os.environ.get("MINIGAME_PORT", "8765")
    try:
        response = httpx.post(f"http://{host}:{port}/signals", json=body, timeout=_TIMEOUT_SECONDS)
    except httpx.HTTPError as e:
        # The overlay not running must never break the calling shell hook.
        print(f"overlay unreachable: {e}", file=sys.stderr)
        return

    if response.status_code != 200:
        print(f"Error: {response.status_code} {response.text}", file=sys.stderr)
        sys.exit(1)
    if not response.json().get("accepted", False):
        print(f"{sys.argv[1]} ignored (sleeping)")


if __name__ == "__main__":
    main()
