"""
SCOREWALL Configuration Management

Loads settings from config/default.json with environment variable overrides.
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class StreamConfig:
    url: str = "ws://defence.explabs.ru/ws"
    receive_timeout: float = 0.5


@dataclass
class SchedulerConfig:
    tick_seconds: float = 2.5
    batch_size: int = 4


@dataclass
class WebConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False


@dataclass
class SimulatorConfig:
    enabled: bool = False
    team_count: int = 8
    service_count: int = 5
    round_seconds: float = 60.0
    exploit_chance: float = 0.3
    down_chance: float = 0.4
    speed_multiplier: float = 10.0  # 10x speed for testing


@dataclass
class Config:
    stream: StreamConfig = field(default_factory=StreamConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    web: WebConfig = field(default_factory=WebConfig)
    simulator: SimulatorConfig = field(default_factory=SimulatorConfig)
    debug: bool = False


def _env_flag(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from JSON file with environment variable overrides.

    Priority (highest to lowest):
    1. Environment variables (SCOREWALL_*)
    2. Config file values
    3. Default values
    """
    config = Config()

    # Determine config file path
    if config_path is None:
        base_dir = Path(__file__).parent.parent
        config_path = base_dir / "config" / "default.json"
    else:
        config_path = Path(config_path)

    # Load from JSON if exists
    if config_path.exists():
        with open(config_path, "r") as f:
            data = json.load(f)

        # Stream config
        if "stream" in data:
            config.stream.url = data["stream"].get("url", config.stream.url)
            config.stream.receive_timeout = data["stream"].get("receive_timeout", config.stream.receive_timeout)

        # Scheduler config
        if "scheduler" in data:
            config.scheduler.tick_seconds = data["scheduler"].get("tick_seconds", config.scheduler.tick_seconds)
            config.scheduler.batch_size = data["scheduler"].get("batch_size", config.scheduler.batch_size)

        # Web config
        if "web" in data:
            config.web.host = data["web"].get("host", config.web.host)
            config.web.port = data["web"].get("port", config.web.port)
            config.web.debug = data["web"].get("debug", config.web.debug)

        # Simulator config
        if "simulator" in data:
            config.simulator.enabled = data["simulator"].get("enabled", config.simulator.enabled)
            config.simulator.team_count = data["simulator"].get("team_count", config.simulator.team_count)
            config.simulator.service_count = data["simulator"].get("service_count", config.simulator.service_count)
            config.simulator.round_seconds = data["simulator"].get("round_seconds", config.simulator.round_seconds)
            config.simulator.exploit_chance = data["simulator"].get("exploit_chance", config.simulator.exploit_chance)
            config.simulator.down_chance = data["simulator"].get("down_chance", config.simulator.down_chance)
            config.simulator.speed_multiplier = data["simulator"].get("speed_multiplier", config.simulator.speed_multiplier)

        config.debug = data.get("debug", config.debug)

    # Environment variable overrides
    if os.environ.get("SCOREWALL_STREAM_URL"):
        config.stream.url = os.environ["SCOREWALL_STREAM_URL"]
    if os.environ.get("SCOREWALL_TICK_SECONDS"):
        config.scheduler.tick_seconds = float(os.environ["SCOREWALL_TICK_SECONDS"])
    if os.environ.get("SCOREWALL_BATCH_SIZE"):
        config.scheduler.batch_size = int(os.environ["SCOREWALL_BATCH_SIZE"])
    if os.environ.get("SCOREWALL_WEB_PORT"):
        config.web.port = int(os.environ["SCOREWALL_WEB_PORT"])
    if os.environ.get("SCOREWALL_SIMULATOR"):
        config.simulator.enabled = _env_flag(os.environ["SCOREWALL_SIMULATOR"])
    if os.environ.get("SCOREWALL_DEBUG"):
        config.debug = _env_flag(os.environ["SCOREWALL_DEBUG"])

    return config


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance, loading it if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Config) -> None:
    """Set the global config instance."""
    global _config
    _config = config
