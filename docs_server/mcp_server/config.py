"""Configuration for the MCP server."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Process settings, overridable with DOCS_SERVER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCS_SERVER_",
        env_file=".env",
        extra="ignore",
    )

    base_path: Path = Field(default_factory=Path.cwd)
    docs_dir: str = "docsdata"
    config_file: str = "config.json"
    repodata_file: str = "repodata.json"

    github_api_url: str = "https://api.github.com"
    request_timeout: float = 30.0

    server_name: str = "docs-server"
    server_version: str = "1.0.0"
    log_level: str = "INFO"

    @property
    def docs_path(self) -> Path:
        return self.base_path / self.docs_dir

    @property
    def config_path(self) -> Path:
        return self.base_path / self.config_file

    @property
    def repodata_path(self) -> Path:
        return self.base_path / self.repodata_file

    def __repr__(self) -> str:
        return f"ServerSettings(base_path='{self.base_path}')"
