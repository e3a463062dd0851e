"""
Runtime configuration.

Settings come from ENROLLSPLIT_* environment variables, optionally seeded from
a .env file in the working directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def load_env() -> None:
    """Load .env from the working directory if present. Existing variables win."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False
    input_delimiter: str = ","
    input_encoding: str = "utf-8-sig"
    skip_malformed: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (for tests)

        Raises:
            ValueError: If a variable holds an unusable value
        """
        env = os.environ if environ is None else environ

        log_level = env.get("ENROLLSPLIT_LOG_LEVEL", cls.log_level).strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"ENROLLSPLIT_LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got {log_level!r}")

        delimiter = env.get("ENROLLSPLIT_INPUT_DELIMITER", cls.input_delimiter)
        if delimiter == "\\t":
            delimiter = "\t"
        if len(delimiter) != 1:
            raise ValueError(f"ENROLLSPLIT_INPUT_DELIMITER must be a single character, got {delimiter!r}")

        return cls(
            log_level=log_level,
            log_dir=Path(env.get("ENROLLSPLIT_LOG_DIR", str(cls.log_dir))),
            log_to_file=_parse_bool("ENROLLSPLIT_LOG_TO_FILE", env.get("ENROLLSPLIT_LOG_TO_FILE", "false")),
            input_delimiter=delimiter,
            input_encoding=env.get("ENROLLSPLIT_INPUT_ENCODING", cls.input_encoding),
            skip_malformed=_parse_bool("ENROLLSPLIT_SKIP_MALFORMED", env.get("ENROLLSPLIT_SKIP_MALFORMED", "false")),
        )
