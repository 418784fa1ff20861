"""
Configuration Management

Loads sewline settings from the environment (optionally a .env file) and
configures logging.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from sewline.domain.models import DEFAULT_EFFICIENCY
from sewline.domain.policies import DefaultAlertPolicy, SlotBuildConfig, VariancePolicy

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass(frozen=True)
class Settings:
    """Runtime settings for planning, alerting and logging"""
    log_level: str = "INFO"
    start_hour: int = 9
    end_hour: int = 17
    lunch_hour: int = 13
    default_efficiency: float = DEFAULT_EFFICIENCY
    variance_policy: VariancePolicy = VariancePolicy.SUPPRESS

    def slot_config(self) -> SlotBuildConfig:
        return SlotBuildConfig(
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            lunch_hour=self.lunch_hour,
        )

    def alert_thresholds(self) -> DefaultAlertPolicy:
        return DefaultAlertPolicy(variance_policy=self.variance_policy)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings(env_path: Optional[str] = None) -> Settings:
    """
    Load settings from environment variables.

    Args:
        env_path: Optional path to .env file. If None, searches in current directory.

    Returns:
        Settings with defaults for every unset variable

    Raises:
        ValueError: If a variable is set to a value that cannot be parsed
    """
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    log_level = os.getenv("SEWLINE_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"SEWLINE_LOG_LEVEL must be a logging level, got {log_level!r}")

    policy = os.getenv("SEWLINE_VARIANCE_POLICY", VariancePolicy.SUPPRESS.value)
    try:
        variance_policy = VariancePolicy(policy.strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in VariancePolicy)
        raise ValueError(f"SEWLINE_VARIANCE_POLICY must be one of {choices}, got {policy!r}")

    efficiency = _env_float("SEWLINE_DEFAULT_EFFICIENCY", DEFAULT_EFFICIENCY)
    if not 0 < efficiency <= 1:
        raise ValueError(f"SEWLINE_DEFAULT_EFFICIENCY must be in (0, 1], got {efficiency}")

    settings = Settings(
        log_level=log_level,
        start_hour=_env_int("SEWLINE_START_HOUR", 9),
        end_hour=_env_int("SEWLINE_END_HOUR", 17),
        lunch_hour=_env_int("SEWLINE_LUNCH_HOUR", 13),
        default_efficiency=efficiency,
        variance_policy=variance_policy,
    )
    if settings.end_hour < settings.start_hour:
        raise ValueError(
            f"SEWLINE_END_HOUR ({settings.end_hour}) is before "
            f"SEWLINE_START_HOUR ({settings.start_hour})"
        )
    return settings


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line use"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
