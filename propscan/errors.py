"""Exception hierarchy raised while extracting component props."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .typegraph.base import SourceLocation


class PropScanError(RuntimeError):
    """Base class for every propscan failure."""


class SourceParseError(PropScanError):
    """Raised when a source file cannot be read or parsed."""


class ClassificationError(PropScanError):
    """Raised when a type cannot be turned into a prop schema."""


class UnclassifiableTypeError(ClassificationError):
    """No classification rule matched and the lenient fallback is disabled."""

    def __init__(
        self,
        type_text: str,
        symbol_name: Optional[str] = None,
        location: Optional["SourceLocation"] = None,
    ) -> None:
        self.type_text = type_text
        self.symbol_name = symbol_name
        self.location = location
        parts = [f"Cannot classify type `{type_text}`"]
        if symbol_name:
            parts.append(f"(symbol {symbol_name})")
        if location is not None:
            parts.append(f"at {location}")
        super().__init__(" ".join(parts))


class MissingTypeInformationError(ClassificationError):
    """A property has neither a declaration nor a resolvable type."""

    def __init__(self, property_name: str) -> None:
        self.property_name = property_name
        super().__init__(f"No type information available for property '{property_name}'")


class UnionCompositionError(ClassificationError):
    """A union constituent failed to classify."""

    def __init__(self, property_name: Optional[str], cause: ClassificationError) -> None:
        self.property_name = property_name
        owner = f"property '{property_name}'" if property_name else "a top-level type"
        super().__init__(f"Failed to classify a union member of {owner}: {cause}")


__all__ = [
    "ClassificationError",
    "MissingTypeInformationError",
    "PropScanError",
    "SourceParseError",
    "UnclassifiableTypeError",
    "UnionCompositionError",
]
