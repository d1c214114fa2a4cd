"""
Runtime settings for the HTTP service.

Values are loaded from environment variables with sensible defaults. The
kernel never reads these; they only bound what the API accepts.
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from fracticons.kernel.errors import InvalidOptionError

ENV_PREFIX = "FRACTICONS_"


@dataclass(frozen=True)
class Settings:
    default_size: int = 128
    default_resolution: int = 64
    max_size: int = 1024
    max_resolution: int = 256
    max_colors: int = 64
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"


_INT_FIELDS = ("default_size", "default_resolution", "max_size", "max_resolution", "max_colors", "port")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    environ = os.environ if environ is None else environ
    values = {}
    for f in fields(Settings):
        name = f.name
        key = ENV_PREFIX + name.upper()
        raw = environ.get(key)
        if raw is None or raw == "":
            continue
        if name in _INT_FIELDS:
            try:
                values[name] = int(raw)
            except ValueError:
                raise InvalidOptionError(f"{key} must be an integer, got {raw!r}") from None
        else:
            values[name] = raw.strip()
    settings = Settings(**values)
    if settings.default_size > settings.max_size:
        raise InvalidOptionError(f"{ENV_PREFIX}DEFAULT_SIZE exceeds {ENV_PREFIX}MAX_SIZE")
    if settings.default_resolution > settings.max_resolution:
        raise InvalidOptionError(f"{ENV_PREFIX}DEFAULT_RESOLUTION exceeds {ENV_PREFIX}MAX_RESOLUTION")
    return settings
