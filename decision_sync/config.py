"""Application configuration loaded from environment variables."""

from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KNOWN_STATUSES: Tuple[str, ...] = ("Accepted", "Proposed", "Draft", "Deprecated")


class SyncConfig(BaseModel):
    """Immutable options handed to a single pipeline run."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "https://nordicexperiencedesign.atlassian.net"
    space_key: str = "NSME"
    root_id: int = 17104898
    known_statuses: FrozenSet[str] = frozenset(DEFAULT_KNOWN_STATUSES)
    page_size: int = Field(default=50, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)
    fetch_concurrency: int = Field(default=10, ge=0)
    output_path: Path = Path(".claude/rules/decisions.md")
    include_missing_summary: bool = False
    fail_on_missing_summary: bool = False
    debug_bodies: bool = False

    def page_url(self, page_id: int) -> str:
        return f"{self.base_url.rstrip('/')}/wiki/spaces/{self.space_key}/pages/{page_id}"


class Settings(BaseSettings):
    """Global application settings."""

    confluence_email: Optional[str] = Field(
        default=None, description="Atlassian account e-mail used for API auth."
    )
    confluence_api_token: Optional[str] = Field(
        default=None, description="Atlassian API token paired with the e-mail."
    )
    confluence_base_url: str = "https://nordicexperiencedesign.atlassian.net"
    confluence_space: str = "NSME"
    decision_log_root: int = 17104898
    known_statuses: Tuple[str, ...] = DEFAULT_KNOWN_STATUSES

    page_size: int = 50
    request_timeout: float = 30.0
    fetch_concurrency: int = 10

    output_path: str = ".claude/rules/decisions.md"
    include_missing_summary: bool = False
    fail_on_missing_summary: bool = False

    sync_debug: bool = False
    github_step_summary: Optional[str] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def output_path_obj(self) -> Path:
        return Path(self.output_path)

    @property
    def step_summary_path_obj(self) -> Optional[Path]:
        if not self.github_step_summary:
            return None
        return Path(self.github_step_summary)

    def sync_config(self) -> SyncConfig:
        return SyncConfig(
            base_url=self.confluence_base_url,
            space_key=self.confluence_space,
            root_id=self.decision_log_root,
            known_statuses=frozenset(self.known_statuses),
            page_size=self.page_size,
            request_timeout=self.request_timeout,
            fetch_concurrency=self.fetch_concurrency,
            output_path=self.output_path_obj,
            include_missing_summary=self.include_missing_summary,
            fail_on_missing_summary=self.fail_on_missing_summary,
            debug_bodies=self.sync_debug,
        )


settings = Settings()
