from __future__ import annotations

from pathlib import Path

CONFIG_FILENAME = "ndjson-stream.yaml"


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest ndjson-stream.yaml by walking up from `start`.

    This keeps behavior predictable when invoking `ndjson-stream` from subdirectories.
    """

    cur = (start or Path.cwd()).resolve()
    for p in [cur, *cur.parents]:
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
