"""
Configuration providers: in-memory values, YAML files and environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from pydantic import BaseModel

from .errors import ConfigError, InvalidTypeError
from .figment import DEFAULT_PROFILE, Metadata, ProfileMap, Provider
from .logging import get_logger

logger = get_logger(__name__)


class HexStringLoader(yaml.SafeLoader):
    """
    Safe YAML loader that keeps `0x`-prefixed integers as strings.

    Unquoted addresses and hashes keep their leading zeros and letter case, so that checksums
    are validated the same way as on the command line.
    """


def construct_hex_preserving_int(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> Any:
    """Construct a YAML integer, returning hexadecimal ones as their original text."""
    value = loader.construct_scalar(node)
    if isinstance(value, str) and value.lstrip("+-").startswith("0x"):
        return value
    return loader.construct_yaml_int(node)


HexStringLoader.add_constructor("tag:yaml.org,2002:int", construct_hex_preserving_int)


class Serialized(Provider):
    """Provides a fixed set of values for a single profile."""

    def __init__(
        self, values: Mapping[str, Any], profile: str = DEFAULT_PROFILE, name: str = "Serialized"
    ):
        """Initialize the provider with the values it returns."""
        self.values = dict(values)
        self.profile = profile
        self.name = name

    @classmethod
    def defaults(cls, model: BaseModel, profile: str = DEFAULT_PROFILE) -> "Serialized":
        """Provide every field of `model`, including unset and `None` ones."""
        return cls(
            model.model_dump(mode="python"),
            profile=profile,
            name=f"{model.__class__.__name__} defaults",
        )

    def metadata(self) -> Metadata:  # noqa: D102
        return Metadata(self.name)

    def data(self) -> ProfileMap:  # noqa: D102
        return {self.profile: dict(self.values)}


class YamlFile(Provider):
    """
    Provides the profiles stored in a YAML file.

    The file is expected to hold a `profile` mapping, e.g.:

    ```yaml
    profile:
      default:
        chain_id: mainnet
      ci:
        verbosity: 3
    ```

    The file is read as UTF-8. Hexadecimal scalars such as `sender: 0xAbC...` are kept as
    strings. A missing file provides no values.
    """

    def __init__(self, path: Path):
        """Initialize the provider with the path of the YAML file."""
        self.path = Path(path)

    def metadata(self) -> Metadata:  # noqa: D102
        return Metadata("YAML file", str(self.path))

    def data(self) -> ProfileMap:  # noqa: D102
        if not self.path.exists():
            logger.debug(f"Configuration file {self.path} does not exist, skipping.")
            return {}
        with self.path.open("r", encoding="utf-8") as file:
            try:
                content = yaml.load(file, Loader=HexStringLoader)
            except (yaml.YAMLError, UnicodeDecodeError) as e:
                raise ConfigError(f"Invalid YAML in configuration file '{self.path}': {e}") from e
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise InvalidTypeError(content, f"map at the top level of '{self.path}'")
        profiles = content.get("profile", {})
        if not isinstance(profiles, dict):
            raise InvalidTypeError(profiles, f"map of profiles under `profile` in '{self.path}'")
        return {
            str(profile): {} if values is None else values for profile, values in profiles.items()
        }


class Env(Provider):
    """
    Provides values from environment variables starting with `prefix`.

    `EVM_CHAIN_ID=5` provides `chain_id: 5` for the selected profile. Values are parsed as
    YAML scalars so that numbers and booleans keep their type.
    """

    ignored = ("PROFILE",)

    def __init__(
        self,
        prefix: str,
        profile: str = DEFAULT_PROFILE,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize the provider with the variable prefix and the target profile."""
        self.prefix = prefix
        self.profile = profile
        self.environ = os.environ if environ is None else environ

    def metadata(self) -> Metadata:  # noqa: D102
        return Metadata("Environment variables", f"{self.prefix}*")

    def data(self) -> ProfileMap:  # noqa: D102
        values: Dict[str, Any] = {}
        for name, raw in self.environ.items():
            if not name.startswith(self.prefix):
                continue
            key = name[len(self.prefix) :]
            if not key or key in self.ignored:
                continue
            values[key.lower()] = self.parse_value(raw)
        return {self.profile: values} if values else {}

    @staticmethod
    def parse_value(raw: str) -> Any:
        """Parse an environment value as a YAML scalar, falling back to the raw string."""
        if raw.startswith(("0x", "0X")):
            # keep hex strings intact for addresses and hashes
            return raw
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw
        if isinstance(value, (dict, list)):
            return raw
        return value
