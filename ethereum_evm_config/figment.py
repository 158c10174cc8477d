"""
Layered configuration built from a stack of providers.

Each provider contributes a mapping of profile name to key/value pairs. Providers are
combined in order with either `merge` (the new provider wins on conflicts) or `join`
(existing values win). When values are extracted for a profile, the values of the
`default` profile are used as a base and the selected profile's values are layered on top.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ConfigError, InvalidTypeError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_PROFILE = "default"

Values = Dict[str, Any]
ProfileMap = Dict[str, Values]

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Metadata:
    """Describes where a set of configuration values came from."""

    name: str
    source: str | None = None

    def __str__(self) -> str:
        """Return a human-readable description of the provider."""
        if self.source:
            return f"{self.name} ({self.source})"
        return self.name


class Provider(ABC):
    """A source of configuration values, grouped by profile."""

    @abstractmethod
    def metadata(self) -> Metadata:
        """Return metadata describing this provider."""
        pass

    @abstractmethod
    def data(self) -> Mapping[str, Mapping[str, Any]]:
        """Return the values of this provider keyed by profile name."""
        pass


def check_profile_map(data: Any, metadata: Metadata) -> ProfileMap:
    """
    Validate that a provider returned a mapping of profile names to key/value maps.

    Raises `InvalidTypeError` for anything else.
    """
    if not isinstance(data, Mapping):
        raise InvalidTypeError(data, f"map of profiles from {metadata}")
    checked: ProfileMap = {}
    for profile, values in data.items():
        if not isinstance(profile, str):
            raise InvalidTypeError(profile, f"profile name from {metadata}")
        if not isinstance(values, Mapping):
            raise InvalidTypeError(
                values, f"map of values for profile `{profile}` from {metadata}"
            )
        for key in values:
            if not isinstance(key, str):
                raise InvalidTypeError(key, f"string key in profile `{profile}` from {metadata}")
        checked[profile] = dict(values)
    return checked


class Figment:
    """An ordered, immutable stack of configuration providers."""

    def __init__(
        self,
        layers: Tuple[Tuple[Literal["merge", "join"], Provider], ...] = (),
        profile: str = DEFAULT_PROFILE,
    ):
        """Initialize the figment with the given layers and selected profile."""
        self._layers = layers
        self._profile = profile

    @property
    def profile(self) -> str:
        """The profile values are extracted for."""
        return self._profile

    @property
    def providers(self) -> List[Provider]:
        """The providers of this figment, in the order they were added."""
        return [provider for _, provider in self._layers]

    def merge(self, provider: Provider) -> "Figment":
        """Return a new figment where `provider` overrides the existing values."""
        return Figment(self._layers + (("merge", provider),), self._profile)

    def join(self, provider: Provider) -> "Figment":
        """Return a new figment where `provider` only fills in missing values."""
        return Figment(self._layers + (("join", provider),), self._profile)

    def select(self, profile: str) -> "Figment":
        """Return a new figment that extracts values for `profile`."""
        return Figment(self._layers, profile)

    def data(self) -> ProfileMap:
        """Combine the values of all providers, keyed by profile."""
        combined: ProfileMap = {}
        for how, provider in self._layers:
            metadata = provider.metadata()
            provided = check_profile_map(provider.data(), metadata)
            for profile, values in provided.items():
                current = combined.setdefault(profile, {})
                for key, value in values.items():
                    if how == "join" and key in current:
                        continue
                    if key in current and current[key] != value:
                        logger.debug(
                            f"{metadata}: overriding `{profile}.{key}` "
                            f"({current[key]!r} -> {value!r})"
                        )
                    current[key] = value
            logger.verbose(f"Applied configuration provider: {metadata}")
        return combined

    def values(self) -> Values:
        """Return the flattened values of the selected profile over the default profile."""
        combined = self.data()
        values = dict(combined.get(DEFAULT_PROFILE, {}))
        if self._profile != DEFAULT_PROFILE:
            values.update(combined.get(self._profile, {}))
        return values

    def extract(self, model: Type[M], **extra: Any) -> M:
        """
        Validate the values of the selected profile into `model`.

        Keys unknown to `model` are ignored. Validation errors are raised as `ConfigError`.
        """
        values = self.values()
        fields = model.model_fields
        unknown = sorted(key for key in values if key not in fields)
        if unknown:
            logger.debug(f"Ignoring keys unknown to {model.__name__}: {', '.join(unknown)}")
        known = {key: value for key, value in values.items() if key in fields}
        try:
            return model.model_validate(known | extra)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration for profile `{self._profile}`: {e}"
            ) from e
