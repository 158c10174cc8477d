"""Base pydantic classes used to define the configuration models."""

from typing import TypeVar

from pydantic import BaseModel, ConfigDict

from .mixins import ModelCustomizationsMixin

Model = TypeVar("Model", bound=BaseModel)


class EvmBaseModel(BaseModel, ModelCustomizationsMixin):
    """Base model for all configuration models."""

    model_config = ConfigDict(extra="forbid")


class CopyValidateModel(EvmBaseModel):
    """Model that supports copying with validation."""

    def copy(self: Model, **kwargs) -> Model:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))


class FrozenModel(EvmBaseModel):
    """A model whose values cannot change after construction."""

    model_config = ConfigDict(extra="forbid", frozen=True)
