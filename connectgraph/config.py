"""
Configuration for ConnectGraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """Record source configuration."""

    backend: str = "memory"  # memory, sqlite
    db_path: str = "data/connectgraph.db"


class LayoutConfig(BaseModel):
    """Force layout tuning. Pattern/suggestion thresholds are fixed and not configurable."""

    width: float = 800.0
    height: float = 400.0

    # Forces
    charge_strength: float = -200.0
    base_link_distance: float = 100.0
    link_distance_per_strength: float = 5.0
    collision_padding: float = 10.0

    # Alpha schedule
    alpha_min: float = 0.001
    alpha_target_drag: float = 0.3
    velocity_decay: float = 0.4
    settling_alpha: float = 0.1
    resize_alpha: float = 0.3

    # Interaction
    min_zoom: float = 0.3
    max_zoom: float = 3.0
    zoom_in_factor: float = 1.3
    zoom_out_factor: float = 0.7
    drag_threshold: float = 3.0

    # Tick loop
    frame_interval: float = 1 / 60
    max_headless_ticks: int = 1000

    @property
    def alpha_decay(self) -> float:
        """Decay that takes alpha from 1 to alpha_min in about 300 ticks."""
        return 1 - self.alpha_min ** (1 / 300)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            CONNECTGRAPH_STORE_BACKEND: Record source backend (memory, sqlite)
            CONNECTGRAPH_STORE_DB_PATH: SQLite database path
            CONNECTGRAPH_LAYOUT_WIDTH / CONNECTGRAPH_LAYOUT_HEIGHT: Viewport size
            CONNECTGRAPH_LAYOUT_CHARGE: Many-body charge strength
            CONNECTGRAPH_LAYOUT_DRAG_THRESHOLD: Pixels before a press becomes a drag
            CONNECTGRAPH_LOG_LEVEL: Log level
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        layout_defaults = LayoutConfig()

        return cls(
            store=StoreConfig(
                backend=get_env("CONNECTGRAPH_STORE_BACKEND", "memory"),
                db_path=get_env("CONNECTGRAPH_STORE_DB_PATH", "data/connectgraph.db"),
            ),
            layout=LayoutConfig(
                width=get_env("CONNECTGRAPH_LAYOUT_WIDTH", layout_defaults.width),
                height=get_env("CONNECTGRAPH_LAYOUT_HEIGHT", layout_defaults.height),
                charge_strength=get_env(
                    "CONNECTGRAPH_LAYOUT_CHARGE", layout_defaults.charge_strength
                ),
                drag_threshold=get_env(
                    "CONNECTGRAPH_LAYOUT_DRAG_THRESHOLD", layout_defaults.drag_threshold
                ),
                max_headless_ticks=get_env(
                    "CONNECTGRAPH_LAYOUT_MAX_TICKS", layout_defaults.max_headless_ticks
                ),
            ),
            logging=LoggingConfig(
                level=get_env("CONNECTGRAPH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("CONNECTGRAPH_LOG_TO_FILE", True),
                log_dir=get_env("CONNECTGRAPH_LOG_DIR", "logs"),
                file_rotation=get_env("CONNECTGRAPH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("CONNECTGRAPH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("CONNECTGRAPH_LOG_COMPRESSION", "zip"),
                serialize=get_env("CONNECTGRAPH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        final_dict = {**config_dict}

        # Only non-default env sections override YAML
        default = cls()
        if env_config.store != default.store:
            final_dict["store"] = env_config.store.model_dump()
        if env_config.layout != default.layout:
            final_dict["layout"] = env_config.layout.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
