"""Fully qualified framework type names mapped to opaque prop schema variants."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .models import EVENT, REACT_ELEMENT, REACT_NODE, PropType, simple_prop_type

_EVENT_TYPES = (
    "SyntheticEvent",
    "BaseSyntheticEvent",
    "AnimationEvent",
    "ChangeEvent",
    "ClipboardEvent",
    "CompositionEvent",
    "DragEvent",
    "FocusEvent",
    "FormEvent",
    "KeyboardEvent",
    "MouseEvent",
    "PointerEvent",
    "TouchEvent",
    "TransitionEvent",
    "UIEvent",
    "WheelEvent",
)

_registry: Dict[str, PropType] = {f"React.{name}": EVENT for name in _EVENT_TYPES}
_registry.update(
    {
        "React.ReactElement": REACT_ELEMENT,
        "JSX.Element": REACT_ELEMENT,
        "React.JSX.Element": REACT_ELEMENT,
        "React.ReactNode": REACT_NODE,
        "React.ReactChild": REACT_NODE,
        "React.ReactFragment": REACT_NODE,
    }
)

KNOWN_SYMBOLS: Mapping[str, PropType] = MappingProxyType(_registry)


def lookup_known_symbol(
    name: Optional[str], registry: Mapping[str, PropType] = KNOWN_SYMBOLS
) -> Optional[PropType]:
    if name is None:
        return None
    return registry.get(name)


def extend_registry(extra: Mapping[str, str]) -> Mapping[str, PropType]:
    """Return a new read-only registry with ``name -> kind`` entries layered on top."""
    if not extra:
        return KNOWN_SYMBOLS
    merged: Dict[str, PropType] = dict(KNOWN_SYMBOLS)
    for name, kind in extra.items():
        merged[name] = simple_prop_type(kind)
    return MappingProxyType(merged)


__all__ = ["KNOWN_SYMBOLS", "extend_registry", "lookup_known_symbol"]
