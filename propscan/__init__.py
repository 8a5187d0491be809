"""Extract React component props schemas from TypeScript sources."""

from .classifier import ClassificationContext, ErrorPolicy, TypeClassifier
from .errors import (
    ClassificationError,
    MissingTypeInformationError,
    PropScanError,
    SourceParseError,
    UnclassifiableTypeError,
    UnionCompositionError,
)
from .locator import ComponentLocator
from .models import ComponentSpec, FinderResult, ObjectSpec, PropSpec

__version__ = "0.1.0"

__all__ = [
    "ClassificationContext",
    "ClassificationError",
    "ComponentLocator",
    "ComponentSpec",
    "ErrorPolicy",
    "FinderResult",
    "MissingTypeInformationError",
    "ObjectSpec",
    "PropScanError",
    "PropSpec",
    "SourceParseError",
    "TypeClassifier",
    "UnclassifiableTypeError",
    "UnionCompositionError",
]
