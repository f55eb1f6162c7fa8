from __future__ import annotations

import os
from pathlib import Path


def parse_env_file(path: str | Path) -> dict[str, str]:
    """Parse KEY=VALUE lines from a .env file.

    Blank lines and lines starting with '#' are skipped, a leading
    ``export`` is accepted, and matching quotes around values are removed.
    """
    values: dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        values[key.strip()] = value
    return values


def load_env_file_if_present(path: str | Path = ".env", override: bool = False) -> dict[str, str]:
    """Load a .env file into ``os.environ`` if it exists.

    Credentials such as ``SHARESIES_USERNAME`` and ``SHARESIES_PASSWORD`` are
    usually kept there. Existing environment variables win unless
    ``override`` is set. Returns everything read from the file.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    loaded = parse_env_file(env_path)
    for key, value in loaded.items():
        if override or key not in os.environ:
            os.environ[key] = value
    return loaded
