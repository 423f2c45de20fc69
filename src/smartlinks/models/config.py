"""Pydantic configuration models for smartlinks."""

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

DEFAULT_LINKMATE_ENDPOINT = "https://api.narrativ.com/api/v1/publishers/.pub_id./linkmate/smart_links/"
DEFAULT_REDIRECT_TEMPLATE = "https://shop-links.co/{auction_id}/?amp=true"
PUBLISHER_ID_PLACEHOLDER = ".pub_id."
AUCTION_ID_PLACEHOLDER = "{auction_id}"


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    import os
    import re

    if value is None:
        return None

    # Match $VAR or ${VAR}
    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class LinkmateConfig(BaseModel):
    """Configuration for the Linkmate smart-link API.

    ``publisher_id`` supports environment variable expansion using
    $VAR or ${VAR} syntax when given as a string.
    """

    publisher_id: Union[int, str] = Field(..., description="Publisher identifier substituted into the endpoint")
    exclusive_links: bool = Field(False, description="Request exclusive matches for every link")
    link_attribute: str = Field("href", min_length=1, description="Anchor attribute holding the link URL")
    link_selector: str = Field("a", min_length=1, description="CSS selector for eligible anchors")
    endpoint: str = Field(
        DEFAULT_LINKMATE_ENDPOINT,
        description=f"Endpoint template; '{PUBLISHER_ID_PLACEHOLDER}' is replaced by the publisher id",
    )
    redirect_template: str = Field(
        DEFAULT_REDIRECT_TEMPLATE,
        description=f"Redirect URL template; '{AUCTION_ID_PLACEHOLDER}' is replaced by the smart link's auction id",
    )

    model_config = {"extra": "forbid"}

    @field_validator("endpoint")
    @classmethod
    def check_endpoint(cls, v: str) -> str:
        if PUBLISHER_ID_PLACEHOLDER not in v:
            raise ValueError(f"endpoint must contain the '{PUBLISHER_ID_PLACEHOLDER}' placeholder")
        return v

    @field_validator("redirect_template")
    @classmethod
    def check_redirect_template(cls, v: str) -> str:
        if AUCTION_ID_PLACEHOLDER not in v:
            raise ValueError(f"redirect_template must contain '{AUCTION_ID_PLACEHOLDER}'")
        return v

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in the publisher id after init."""
        if isinstance(self.publisher_id, str):
            object.__setattr__(self, "publisher_id", _expand_env_var(self.publisher_id))

    @property
    def endpoint_url(self) -> str:
        """Endpoint with the publisher id substituted."""
        return self.endpoint.replace(PUBLISHER_ID_PLACEHOLDER, str(self.publisher_id))


class NetworkConfig(BaseModel):
    """Configuration for HTTP client and network behavior."""

    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    timeout: float = Field(10.0, gt=0, description="Total request timeout in seconds")

    model_config = {"extra": "forbid"}


class SmartLinksConfig(BaseModel):
    """
    Root configuration model for smartlinks.

    Example:
        config = SmartLinksConfig(
            linkmate=LinkmateConfig(publisher_id=123, exclusive_links=True),
        )

    YAML format:
        linkmate:
          publisher_id: 123
          exclusive_links: false
          link_attribute: href
        network:
          timeout: 5
    """

    linkmate: LinkmateConfig
    network: NetworkConfig = Field(default_factory=NetworkConfig)

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
    def from_yaml(cls, yaml_str: str) -> "SmartLinksConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "SmartLinksConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
