"""Pydantic configuration models for pagefetch."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36 (pagefetch MCP Fetch Bot)"
)


class NetworkConfig(BaseModel):
    """Configuration for the HTTP client and outbound request headers."""

    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header sent with every request")
    accept: str = Field(
        "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        description="Accept header",
    )
    accept_language: str = Field("en-US,en;q=0.5", description="Accept-Language header")
    accept_encoding: str = Field("gzip, deflate, br", description="Accept-Encoding header")
    max_redirects: int = Field(5, ge=0, description="Maximum redirect hops before failing")
    max_content_size: int = Field(
        50 * 1024 * 1024,
        ge=1,
        description="Maximum response body size in bytes",
    )

    model_config = {"extra": "forbid"}

    def request_headers(self) -> dict[str, str]:
        """Headers sent with every GET request."""
        return {
            "User-Agent": self.user_agent,
            "Accept": self.accept,
            "Accept-Language": self.accept_language,
            "Accept-Encoding": self.accept_encoding,
        }


class ExtractionConfig(BaseModel):
    """Tuning knobs for main-content extraction."""

    char_threshold: int = Field(
        500,
        ge=0,
        description="Minimum article text length for extraction to count as successful",
    )
    min_paragraph_length: int = Field(
        25,
        ge=1,
        description="Paragraphs shorter than this do not contribute to candidate scores",
    )

    model_config = {"extra": "forbid"}


class PagefetchConfig(BaseModel):
    """
    Root configuration model for pagefetch.

    Example:
        config = PagefetchConfig(
            network=NetworkConfig(user_agent="my-agent/1.0"),
            default_timeout_ms=10000,
        )

    YAML format:
        default_timeout_ms: 10000
        network:
          user_agent: my-agent/1.0
          max_redirects: 3
        extraction:
          char_threshold: 250
    """

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    default_timeout_ms: int = Field(30000, gt=0, description="Request timeout in milliseconds")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "PagefetchConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "PagefetchConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
