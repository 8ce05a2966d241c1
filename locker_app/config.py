"""Configuration helpers for the locker core."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

from models.taxonomy import FilterMode, OwnershipFilter, SortOrder, validate_filter, validate_sort_order

DEFAULT_SHELF_PREVIEW_LIMIT = 7


@dataclass
class LockerConfig:
    """Defaults applied when a view does not ask for an explicit order or filter.

    Values come from the environment, optionally layered over a small
    ``key: value`` file so deployments can ship per-environment defaults.
    """

    default_sort_order: SortOrder = SortOrder.NEWEST
    default_filter: FilterMode = OwnershipFilter.ALL
    shelf_preview_limit: int = DEFAULT_SHELF_PREVIEW_LIMIT
    log_level: str = "INFO"
    environment: Optional[str] = None

    def __post_init__(self) -> None:
        self.default_sort_order = validate_sort_order(self.default_sort_order)
        self.default_filter = validate_filter(self.default_filter)
        if self.shelf_preview_limit < 0:
            raise ValueError("shelf_preview_limit cannot be negative")

    @classmethod
    def from_env(cls) -> "LockerConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific files live in ``config/environments/<env>.yaml`` by
        default; ``APP_CONFIG_PATH`` points at an explicit file instead.
        Environment variables take precedence over file values.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("LOCKER_CONFIG_DIR", "config/environments"))
        file_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_yaml_config(path)

        def get_value(key: str, env_key: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(env_key, file_config.get(key, default))

        sort_order = get_value("default_sort_order", "LOCKER_DEFAULT_SORT_ORDER", SortOrder.NEWEST.value)
        list_filter = get_value("default_filter", "LOCKER_DEFAULT_FILTER", OwnershipFilter.ALL.value)
        preview_limit = get_value("shelf_preview_limit", "LOCKER_SHELF_PREVIEW_LIMIT", str(DEFAULT_SHELF_PREVIEW_LIMIT))
        log_level = get_value("log_level", "LOG_LEVEL", "INFO")

        try:
            limit = int(str(preview_limit))
        except ValueError:
            raise ValueError(f"Invalid shelf preview limit '{preview_limit}'") from None

        return cls(
            default_sort_order=str(sort_order or SortOrder.NEWEST.value),
            default_filter=str(list_filter or OwnershipFilter.ALL.value),
            shelf_preview_limit=limit,
            log_level=str(log_level or "INFO").upper(),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
