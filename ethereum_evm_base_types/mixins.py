"""
This module provides various mixins for Pydantic models.
"""

from typing import Any, Literal


class ModelCustomizationsMixin:
    """
    A mixin that customizes the behavior of pydantic models. Any pydantic
    configuration override that must apply to all models
    should be placed here.
    """

    def serialize(
        self,
        mode: Literal["json", "python"],
        by_alias: bool,
        exclude_none: bool = True,
    ) -> dict[str, Any]:
        """
        Serializes the model to the specified format with the given parameters.

        :param mode: The mode of serialization.
              If mode is 'json', the output will only contain JSON serializable types.
              If mode is 'python', the output may contain non-JSON-serializable Python objects.
        :param by_alias: Whether to use aliases for field names.
        :param exclude_none: Whether to exclude fields with None values, default is True.
        :return: The serialized representation of the model.
        """
        if not hasattr(self, "model_dump"):
            raise NotImplementedError(
                f"{self.__class__.__name__} does not have 'model_dump' method."
                "Are you sure you are using a Pydantic model?"
            )
        return self.model_dump(mode=mode, by_alias=by_alias, exclude_none=exclude_none)
