"""
Property reflection for preset-capable components.

The store never looks inside a component itself. It goes through a
PropertyReflector, which knows which properties can be preset, how to
read and write them, and how to turn values into text and back.

ModelReflector covers components that are pydantic models: every field
that is not frozen is presettable, and values travel as JSON text.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from pydantic import BaseModel, TypeAdapter

from .presets.errors import PropertyNotApplicableError, SerializationError


class PropertyReflector(ABC):
    """
    Capability interface the store is generic over.

    serialize/deserialize raise SerializationError on failure;
    property_type/get_property/set_property raise PropertyNotApplicableError
    for names the component does not have.
    """

    @abstractmethod
    def list_settable_properties(self, component: Any) -> List[str]:
        """Names of read-write, non-construct-only properties, in a stable order."""
        pass

    @abstractmethod
    def property_type(self, component: Any, name: str) -> Any:
        """Type used to deserialize a stored value for property name."""
        pass

    @abstractmethod
    def get_property(self, component: Any, name: str) -> Any:
        pass

    @abstractmethod
    def set_property(self, component: Any, name: str, value: Any) -> None:
        pass

    @abstractmethod
    def serialize(self, value: Any) -> str:
        pass

    @abstractmethod
    def deserialize(self, value_type: Any, text: str) -> Any:
        pass

    def type_name(self, component: Any) -> str:
        """Stable identifier of the component's kind; the class name by default."""
        return type(component).__name__


class ModelReflector(PropertyReflector):
    """Reflector for pydantic model components."""

    def list_settable_properties(self, component: Any) -> List[str]:
        if not isinstance(component, BaseModel):
            return []
        if type(component).model_config.get("frozen"):
            return []
        return [
            name
            for name, field in type(component).model_fields.items()
            if not field.frozen and not field.exclude
        ]

    def property_type(self, component: Any, name: str) -> Any:
        field = type(component).model_fields.get(name) if isinstance(component, BaseModel) else None
        if field is None:
            raise PropertyNotApplicableError(name, f"not a field of {type(component).__name__}")
        return field.annotation

    def get_property(self, component: Any, name: str) -> Any:
        self.property_type(component, name)
        return getattr(component, name)

    def set_property(self, component: Any, name: str, value: Any) -> None:
        self.property_type(component, name)
        try:
            setattr(component, name, value)
        except (ValueError, TypeError) as e:
            raise SerializationError(name, str(e)) from e

    def serialize(self, value: Any) -> str:
        try:
            return TypeAdapter(type(value)).dump_json(value).decode("utf-8")
        except (ValueError, TypeError) as e:
            raise SerializationError(type(value).__name__, str(e)) from e

    def deserialize(self, value_type: Any, text: str) -> Any:
        try:
            return TypeAdapter(value_type).validate_json(text)
        except (ValueError, TypeError) as e:
            raise SerializationError(getattr(value_type, "__name__", str(value_type)), str(e)) from e
