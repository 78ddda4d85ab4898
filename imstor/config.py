"""Storage configuration: root path, size variants and formats.

A Config can be built directly, from the environment (``IMSTOR_ROOT_PATH``)
or from a YAML file such as::

    root_path: /var/lib/imstor
    formats: [png2jpeg, jpeg]
    sizes:
      - {name: small, width: 30, height: 30}
      - {name: large, width: 300, height: 300}
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .core.models import ORIGINAL_NAME, Size
from .errors import ConfigError
from .imaging.formats import Format, JPEGFormat, PNG2JPEGFormat, format_by_name

ROOT_PATH_ENV = "IMSTOR_ROOT_PATH"

DEFAULT_FORMAT_NAMES = ("png2jpeg", "jpeg")
DEFAULT_FORMATS: tuple[Format, ...] = (PNG2JPEGFormat(), JPEGFormat())


@dataclass(frozen=True)
class Config:
    """Everything a storage engine needs to know about where and what to store."""

    root_path: Path
    sizes: tuple[Size, ...] = ()
    formats: tuple[Format, ...] = DEFAULT_FORMATS

    def __post_init__(self):
        if not str(self.root_path):
            raise ConfigError("Root path must not be empty")
        object.__setattr__(self, "root_path", Path(self.root_path))
        object.__setattr__(self, "sizes", tuple(self.sizes))
        object.__setattr__(self, "formats", tuple(self.formats))
        validate_sizes(self.sizes)

    @property
    def size_names(self) -> list[str]:
        return [size.name for size in self.sizes]

    def with_sizes(self, sizes: Iterable[Size]) -> "Config":
        """Copy of this config with a different set of sizes."""
        return Config(root_path=self.root_path, sizes=tuple(sizes), formats=self.formats)

    @classmethod
    def from_env(
        cls,
        sizes: Iterable[Size] = (),
        formats: Iterable[Format] = DEFAULT_FORMATS,
        env: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        """Build a config whose root path comes from ``IMSTOR_ROOT_PATH``.

        When ``env`` is not given, a ``.env`` file is loaded into the process
        environment first.
        """
        if env is None:
            load_dotenv()
            env = os.environ
        root_path = env.get(ROOT_PATH_ENV)
        if not root_path:
            raise ConfigError(f"{ROOT_PATH_ENV} environment variable is required")
        return cls(root_path=Path(root_path), sizes=tuple(sizes), formats=tuple(formats))


def validate_sizes(sizes: Iterable[Size]) -> None:
    """Check size names are usable as unique file names and dimensions are sane."""
    seen: set[str] = set()
    for size in sizes:
        if not size.name:
            raise ConfigError("Size name must not be empty")
        if size.name == ORIGINAL_NAME:
            raise ConfigError(f"Size name {ORIGINAL_NAME!r} is reserved")
        if "/" in size.name or os.sep in size.name or size.name in (".", ".."):
            raise ConfigError(f"Size name {size.name!r} is not a valid file name")
        if size.name in seen:
            raise ConfigError(f"Duplicate size name: {size.name!r}")
        if size.width < 0 or size.height < 0:
            raise ConfigError(f"Size {size.name!r} has negative dimensions")
        seen.add(size.name)


def load_config(
    config_path: str | Path,
    root_path: Optional[str | Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file
        root_path: Overrides ``root_path`` from the file
        env: Environment used when neither argument nor file sets the root
            path (defaults to the process environment, after ``load_dotenv``)

    Returns:
        The validated Config

    Raises:
        ConfigError: If the file is missing, malformed or invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    try:
        sizes = tuple(Size.from_dict(item) for item in data.get("sizes") or [])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid 'sizes' entry in {config_path}: {e}") from e

    format_names = data.get("formats") or list(DEFAULT_FORMAT_NAMES)
    try:
        formats = tuple(format_by_name(str(name)) for name in format_names)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    root = root_path or data.get("root_path")
    if root:
        return Config(root_path=Path(root), sizes=sizes, formats=formats)
    return Config.from_env(sizes=sizes, formats=formats, env=env)
