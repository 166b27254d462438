"""
Configuration management for PromptPix.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


GLOBAL_CONFIG_DIR = Path.home() / ".promptpix"
GLOBAL_CONFIG_FILE = GLOBAL_CONFIG_DIR / "config.yaml"


@dataclass
class Endpoint:
    """Image-generation endpoint configuration."""

    url: str = ""
    api_key: str = ""
    timeout: Optional[float] = None  # None = wait indefinitely

    @classmethod
    def from_dict(cls, data: dict) -> "Endpoint":
        return cls(
            url=data.get("url", ""),
            api_key=data.get("api_key", ""),
            timeout=data.get("timeout"),
        )

    @classmethod
    def from_env(cls) -> "Endpoint":
        """Load endpoint settings from environment variables."""
        return cls(
            url=os.getenv("PROMPTPIX_ENDPOINT", ""),
            api_key=os.getenv("PROMPTPIX_API_KEY", ""),
        )

    def merge_env(self) -> "Endpoint":
        """Merge with environment variables (env takes precedence)."""
        env = Endpoint.from_env()
        return Endpoint(
            url=env.url or self.url,
            api_key=env.api_key or self.api_key,
            timeout=self.timeout,
        )


@dataclass
class Defaults:
    """Default settings."""

    await_preload: bool = False  # True = keep spinner until the image is loaded

    @classmethod
    def from_dict(cls, data: dict) -> "Defaults":
        return cls(
            await_preload=data.get("await_preload", False),
        )


@dataclass
class Config:
    """Complete configuration."""

    endpoint: Endpoint = field(default_factory=Endpoint)
    defaults: Defaults = field(default_factory=Defaults)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from file and environment."""
        config_path = config_path or GLOBAL_CONFIG_FILE

        # Start with defaults
        config = cls()

        # Load from file if exists
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
                config.endpoint = Endpoint.from_dict(data.get("endpoint") or {})
                config.defaults = Defaults.from_dict(data.get("defaults") or {})

        # Merge environment variables (they take precedence)
        config.endpoint = config.endpoint.merge_env()

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        config_path = config_path or GLOBAL_CONFIG_FILE
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "endpoint": {
                "url": self.endpoint.url,
                "api_key": self.endpoint.api_key,
                "timeout": self.endpoint.timeout,
            },
            "defaults": {
                "await_preload": self.defaults.await_preload,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if not self.endpoint.url:
            issues.append("Generation endpoint not configured (PROMPTPIX_ENDPOINT)")
        elif not self.endpoint.url.startswith(("http://", "https://")):
            issues.append(f"Generation endpoint is not an http(s) URL: {self.endpoint.url}")

        timeout = self.endpoint.timeout
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
            issues.append(f"Endpoint timeout must be a number of seconds, got {timeout!r}")
        elif timeout is not None and timeout <= 0:
            issues.append("Endpoint timeout must be positive")

        return issues
