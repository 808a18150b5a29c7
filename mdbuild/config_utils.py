# config_utils.py - YAML Configuration System for mdbuild
"""
mdbuild configuration utilities with YAML file support.

Configuration Resolution Order (highest to lowest priority):
1. CLI options (applied by the caller through ``overrides``)
2. Environment variables (MDBUILD_CONTENT_DIR, MDBUILD_BASE_URL, etc.)
3. mdbuild.yaml in the project root
4. Built-in defaults

Usage:
    from mdbuild.config_utils import get_config

    config = get_config()
    print(config.content_path)
    print(config.base_url)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List

import yaml

from mdbuild.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "mdbuild.yaml"

ENV_VARS = {
    "MDBUILD_CONTENT_DIR": "content_dir",
    "MDBUILD_OUT_DIR": "out_dir",
    "MDBUILD_CACHE_DIR": "cache_dir",
    "MDBUILD_BASE_URL": "base_url",
}


@dataclass
class MdBuildConfig:
    """Complete mdbuild configuration"""
    # Input
    content_dir: str = "content/posts"
    meta_module: Optional[str] = None

    # Output
    out_dir: str = "public"
    cache_dir: str = ".cache"
    base_url: str = ""

    # Rendering
    default_language: str = "markdown"
    image_quality: int = 80

    # Watch settings
    watch_debounce: float = 2.0

    # Paths (resolved at load time)
    project_root: Optional[Path] = None

    # Extra settings from config file
    extra: Dict[str, Any] = field(default_factory=dict)

    # Track where values came from (for debugging)
    _sources: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.project_root is None:
            self.project_root = Path.cwd()

    def _resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.project_root / path
        return path.resolve()

    @property
    def content_path(self) -> Path:
        return self._resolve(self.content_dir)

    @property
    def meta_module_path(self) -> Path:
        """Absolute path other modules import to get the post metadata"""
        if self.meta_module:
            return self._resolve(self.meta_module)
        return self.content_path / "meta.js"

    @property
    def out_path(self) -> Path:
        return self._resolve(self.out_dir)

    @property
    def cache_path(self) -> Path:
        return self._resolve(self.cache_dir)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)"""
        issues = []
        if not self.content_dir:
            issues.append("content_dir is not set")
        if not self.out_dir:
            issues.append("out_dir is not set")
        if not self.cache_dir:
            issues.append("cache_dir is not set")
        if not 1 <= self.image_quality <= 100:
            issues.append(f"image_quality must be between 1 and 100 (got {self.image_quality})")
        if self.watch_debounce < 0:
            issues.append("watch_debounce cannot be negative")
        if self.base_url and "://" not in self.base_url:
            issues.append(f"base_url should be absolute, e.g. https://example.com (got {self.base_url})")
        return issues

    def source_of(self, attr: str) -> str:
        return self._sources.get(attr, "default")


class ConfigLoader:
    """Load configuration from multiple sources"""

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config = MdBuildConfig(project_root=self.project_dir)

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> MdBuildConfig:
        """Load configuration from all sources in priority order"""
        # Load in reverse priority (lowest first, higher overwrites)
        self._load_yaml_config()
        self._load_env_vars()
        if overrides:
            self._apply_overrides(overrides)
        return self.config

    def _load_yaml_config(self):
        """Load mdbuild.yaml from the project root"""
        yaml_path = self.project_dir / CONFIG_FILE_NAME
        if yaml_path.exists():
            self._load_yaml_file(yaml_path, CONFIG_FILE_NAME)

    def _load_yaml_file(self, path: Path, source_name: str):
        """Load settings from a YAML file"""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                message=f"Failed to parse {path.name}",
                suggestion="Fix the YAML syntax or delete the file to use defaults",
                context={"file": str(path)},
                cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                message=f"{path.name} must contain a mapping of settings",
                context={"file": str(path), "found": type(data).__name__}
            )

        mappings = {
            "content_dir": str,
            "meta_module": str,
            "out_dir": str,
            "cache_dir": str,
            "base_url": str,
            "default_language": str,
            "image_quality": int,
        }

        for yaml_key, convert in mappings.items():
            if yaml_key in data and data[yaml_key] is not None:
                try:
                    value = convert(data[yaml_key])
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(
                        message=f"Invalid value for '{yaml_key}' in {path.name}",
                        context={"file": str(path), "value": data[yaml_key]},
                        cause=e
                    ) from e
                setattr(self.config, yaml_key, value)
                self.config._sources[yaml_key] = source_name

        # Handle nested watch settings
        if "watch" in data and isinstance(data["watch"], dict):
            watch = data["watch"]
            if "debounce" in watch:
                self.config.watch_debounce = float(watch["debounce"])
                self.config._sources["watch_debounce"] = source_name

        # Store any extra settings
        known_keys = set(mappings) | {"watch"}
        for key, value in data.items():
            if key not in known_keys:
                self.config.extra[key] = value

        logger.debug("Loaded configuration from %s", path)

    def _load_env_vars(self):
        """Load from environment variables"""
        for env_name, attr in ENV_VARS.items():
            value = os.environ.get(env_name)
            if value:
                setattr(self.config, attr, value)
                self.config._sources[attr] = f"env:{env_name}"

    def _apply_overrides(self, overrides: Dict[str, Any]):
        for attr, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self.config, attr):
                raise ConfigurationError(message=f"Unknown configuration option: {attr}")
            setattr(self.config, attr, value)
            self.config._sources[attr] = "cli"


# ============================================================================
# Public API
# ============================================================================

def get_config(project_dir: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None) -> MdBuildConfig:
    """
    Get complete mdbuild configuration.

    Args:
        project_dir: Project directory (defaults to cwd)
        overrides: Values that win over every other source (CLI options)

    Returns:
        MdBuildConfig with all settings resolved

    Raises:
        ConfigurationError: If mdbuild.yaml is unreadable or invalid
    """
    loader = ConfigLoader(project_dir)
    return loader.load(overrides)


def create_config_template() -> str:
    """Generate an mdbuild.yaml template."""
    return '''# mdbuild configuration file

# Directory holding one <date>--<slug>/ folder per post
content_dir: content/posts

# Path other modules import to receive the post metadata
# (defaults to <content_dir>/meta.js)
# meta_module: content/posts/meta.js

# Build output and image cache
out_dir: public
cache_dir: .cache

# Public site URL used for sitemap.xml
base_url: https://example.com

# Language used for fenced code blocks with an unknown language
default_language: markdown

# Encoder quality for AVIF/WebP conversions (1-100)
image_quality: 80

# Watch mode settings
watch:
  debounce: 2.0        # Seconds to wait after a file change before rebuilding
'''
