"""
Configuration parameters for TenderSecure.

Defines storage locations, logging behaviour and input limits. Values are
resolved from (lowest to highest precedence): model defaults, an optional
JSON/TOML config file, a `.env` file, and `TENDER_*` environment variables.
"""

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "TENDER_"


class TenderConfig(BaseModel):
    """Node-wide configuration parameters"""

    # Storage
    data_dir: Path = Field(default=Path("~/.tendersecure"), validate_default=True)
    db_name: str = "tender.db"

    # Logging
    log_dir: Path = Path("logs")
    log_level: str = "INFO"
    log_to_file: bool = False

    # Limits
    max_proposal_length: int = Field(default=1024, gt=0)

    # Display
    currency_symbol: str = "TND"

    @field_validator("data_dir", "log_dir")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return Path(value).expanduser()

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    def ensure_dirs(self) -> None:
        """Create necessary directories"""
        self.data_dir.mkdir(exist_ok=True, parents=True)
        if self.log_to_file:
            self.log_dir.mkdir(exist_ok=True, parents=True)


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    suffix = config_path.suffix.lower()
    if suffix == ".json":
        return json.loads(config_path.read_text())
    if suffix == ".toml":
        with config_path.open("rb") as fh:
            data = tomllib.load(fh)
        # Allow either a flat file or a [tender] table
        return data.get("tender", data)
    raise ValueError(f"Unsupported config file type: {config_path.suffix}")


def _read_env() -> Dict[str, str]:
    values = {}
    for name in TenderConfig.model_fields:
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw
    return values


def load_config(config_path: Optional[str] = None) -> TenderConfig:
    """
    Load configuration from file and environment, or use defaults.

    Args:
        config_path: Optional path to a JSON or TOML config file

    Returns:
        TenderConfig instance

    Raises:
        ValueError: unsupported config file extension
        pydantic.ValidationError: invalid values
    """
    load_dotenv(find_dotenv(usecwd=True))

    values: Dict[str, Any] = {}
    if config_path:
        values.update(_read_config_file(Path(config_path)))
    values.update(_read_env())

    return TenderConfig(**values)
