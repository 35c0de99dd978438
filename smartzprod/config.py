# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed, read-only config
#   objects that are passed explicitly into every component.
#
# CLASSES:
# --------
# - Band (frozen dataclass)
#     minimum: float, maximum: float   (inclusive on both ends)
#
# - ValidationConfig (frozen dataclass)
#     name_pattern: str          (letters, spaces, hyphen, apostrophe)
#     identifier_pattern: str    (alphanumeric)
#     positive_int_min/max: int  (default 1 / 9999)
#     positive_decimal_min: float (default 0.1)
#     name_max_length: int       (default 100)
#     identifier_max_length: int (default 50)
#     match_factor_warn: Band    (default 0.1 - 2.0)
#     match_factor_optimal: Band (default 0.5 - 1.5)
#     decimal_places: int        (default 2)
#
# - StorageConfig (frozen dataclass)
#     data_dir: str              (default "data/")
#
# - BackupConfig (frozen dataclass)
#     file_prefix: str           (default "SmartzProd-Backup")
#     file_extension: str        (default "json")
#     mime_type: str             (default "application/json")
#     app_version: str
#
# - TimingConfig (frozen dataclass)
#     debounce_seconds: float    (default 0.2)
#     throttle_seconds: float    (default 0.2)
#
# - AppConfig (frozen dataclass)
#     validation / storage / backup / timing
#
# FUNCTION:
# ---------
# - load_config(env_file=None) -> AppConfig
#     Load .env using python-dotenv, construct a fresh AppConfig,
#     check band nesting and the field rule table.
#
# USAGE:
# ------
#   from smartzprod.config import load_config
#   config = load_config()
#   print(config.validation.match_factor_warn.maximum)
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from smartzprod import __version__
from smartzprod.errors import ConfigError


@dataclass(frozen=True)
class Band:
    """Inclusive numeric range."""
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def __str__(self) -> str:
        return f"{self.minimum} - {self.maximum}"


@dataclass(frozen=True)
class ValidationConfig:
    """Patterns, limits and bands used by the validators."""
    name_pattern: str = r"^[A-Za-z\s'-]+$"
    identifier_pattern: str = r"^[A-Za-z0-9]+$"
    positive_int_min: int = 1
    positive_int_max: int = 9999
    positive_decimal_min: float = 0.1
    name_max_length: int = 100
    identifier_max_length: int = 50
    match_factor_warn: Band = Band(0.1, 2.0)
    match_factor_optimal: Band = Band(0.5, 1.5)
    decimal_places: int = 2


@dataclass(frozen=True)
class StorageConfig:
    """Durable key-value storage configuration."""
    data_dir: str = "data/"


@dataclass(frozen=True)
class BackupConfig:
    """Backup file format."""
    file_prefix: str = "SmartzProd-Backup"
    file_extension: str = "json"
    mime_type: str = "application/json"
    app_version: str = __version__


@dataclass(frozen=True)
class TimingConfig:
    """Deferral windows for field validation handlers."""
    debounce_seconds: float = 0.2
    throttle_seconds: float = 0.2


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def check_bands(validation: ValidationConfig) -> None:
    """
    Check that both bands are well-formed and that warn contains optimal.

    Raises:
        ConfigError: If a band is inverted or the optimal band leaks
                     outside the warn band.
    """
    warn = validation.match_factor_warn
    optimal = validation.match_factor_optimal
    for label, band in (("warn", warn), ("optimal", optimal)):
        if band.minimum >= band.maximum:
            raise ConfigError(f"Match factor {label} band is empty: {band}")
    if optimal.minimum < warn.minimum or optimal.maximum > warn.maximum:
        raise ConfigError(
            f"Optimal band ({optimal}) must lie inside the warn band ({warn})"
        )


def load_config(env_file: Optional[str] = None) -> AppConfig:
    """
    Load configuration from environment variables / .env file.

    Args:
        env_file: Path to a .env file. Defaults to ".env" at the project root.

    Returns:
        AppConfig: A new read-only configuration value

    Raises:
        ConfigError: If a value cannot be parsed or the result is inconsistent
    """
    # Imported here: the validation package itself depends on this module
    from smartzprod.validation.field_rules import FIELD_RULES, check_field_rules

    env_path = Path(env_file) if env_file else Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    defaults = ValidationConfig()
    validation = ValidationConfig(
        match_factor_warn=Band(
            _env_float("SMARTZPROD_MF_WARN_MIN", defaults.match_factor_warn.minimum),
            _env_float("SMARTZPROD_MF_WARN_MAX", defaults.match_factor_warn.maximum),
        ),
        match_factor_optimal=Band(
            _env_float("SMARTZPROD_MF_OPTIMAL_MIN", defaults.match_factor_optimal.minimum),
            _env_float("SMARTZPROD_MF_OPTIMAL_MAX", defaults.match_factor_optimal.maximum),
        ),
    )
    check_bands(validation)
    check_field_rules(FIELD_RULES)

    storage = StorageConfig(data_dir=os.getenv("SMARTZPROD_DATA_DIR", "data/"))

    backup = BackupConfig(
        file_prefix=os.getenv("SMARTZPROD_BACKUP_PREFIX", "SmartzProd-Backup"),
    )

    timing = TimingConfig(
        debounce_seconds=_env_float("SMARTZPROD_DEBOUNCE_SECONDS", 0.2),
        throttle_seconds=_env_float("SMARTZPROD_THROTTLE_SECONDS", 0.2),
    )

    return AppConfig(
        validation=validation,
        storage=storage,
        backup=backup,
        timing=timing,
    )
