"""medibot Configuration.

Includes:
- AppConfig: Application settings with environment variable support

Environment Variables:
    MEDIBOT_PROJECT_PATH: Directory holding .medibot/config.yaml
    MEDIBOT_CATALOG_PATH: Intent catalog file (JSON or YAML)
    MEDIBOT_HISTORY_PATH: Chat history JSON file
    MEDIBOT_MAX_HISTORY: Maximum chat messages kept
    MEDIBOT_DEBUG: Enable debug logging
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = ".medibot"
CONFIG_FILE = "config.yaml"

# Keys persisted in config.yaml
_FILE_KEYS = ("catalog_path", "history_path", "max_history", "debug")


class AppConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration is loaded from environment variables with MEDIBOT_ prefix.
    For example, MEDIBOT_CATALOG_PATH sets catalog_path.

    Precedence (highest to lowest):
        1. Environment variables (MEDIBOT_*)
        2. Config file (.medibot/config.yaml)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="MEDIBOT_",
        extra="ignore",
    )

    project_path: Path = Field(default_factory=Path.cwd)

    # None means the bundled sample catalog
    catalog_path: Optional[Path] = None
    history_path: Path = Field(
        default_factory=lambda: Path("~/.medibot/history.json").expanduser()
    )
    max_history: int = Field(default=50, ge=1)
    debug: bool = False

    @property
    def config_file(self) -> Path:
        return self.project_path / CONFIG_DIR / CONFIG_FILE

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        """Load configuration from .medibot/config.yaml if it exists.

        Values from the file fill in settings not given through the
        environment.

        Args:
            path: Project path to load configuration for

        Returns:
            AppConfig with file values applied (or defaults if no config exists)
        """
        from ruamel.yaml import YAML

        config = cls(project_path=path)
        config_file = config.config_file

        if config_file.exists():
            yaml = YAML()
            with config_file.open() as f:
                data = yaml.load(f)

            if data:
                overrides = {
                    key: data[key]
                    for key in _FILE_KEYS
                    if key in data and key not in config.model_fields_set
                }
                if overrides:
                    config = cls(project_path=path, **overrides)

        return config

    def save(self) -> None:
        """Save configuration to .medibot/config.yaml in the project path."""
        from ruamel.yaml import YAML

        config_file = self.config_file
        config_file.parent.mkdir(parents=True, exist_ok=True)

        yaml = YAML()
        yaml.default_flow_style = False

        data = {
            "catalog_path": str(self.catalog_path) if self.catalog_path else None,
            "history_path": str(self.history_path),
            "max_history": self.max_history,
            "debug": self.debug,
        }

        with config_file.open("w") as f:
            yaml.dump(data, f)


__all__ = ["AppConfig"]
