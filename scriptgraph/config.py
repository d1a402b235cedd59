from pathlib import Path
from pydantic_settings import BaseSettings


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Global settings from .env and environment."""

    log_level: str = "WARNING"
    recent_events: int = 5
    workspace_root: Path = Path("./workspace")

    class Config:
        env_file = ".env"
        env_prefix = "SCRIPTGRAPH_"
        case_sensitive = False

    @property
    def rules_path(self) -> Path:
        return self.workspace_root / "continuity_rules.yaml"

    def validate_log_level(self):
        """Ensure log level names a standard logging level."""
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")


settings = Settings()
