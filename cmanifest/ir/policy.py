"""Filter & visibility policy — what ends up in a manifest.

Evaluated once per declaration with no cross-declaration state:
1. Lifecycle plumbing (constructors/destructors) is excluded by name
2. Remaining functions are included only when carrying an export marker
3. Structs, enums, forward declarations and includes are always kept
4. Anything else is ignored
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from cmanifest.grammar.models import (
    GEnumDecl,
    GFunctionDecl,
    GInclude,
    GMarker,
    GStructDecl,
    GStructIndicator,
)


DEFAULT_EXCLUDED_PATTERNS = ("CreateWith", "Delete")


class Action(Enum):
    IMPORT = "import"
    STRUCT_INDICATOR = "struct_indicator"
    STRUCT = "struct"
    ENUM = "enum"
    FUNCTION = "function"
    PROPERTY = "property"
    SKIP = "skip"


@dataclass(frozen=True)
class Decision:
    action: Action
    is_public: bool = False
    is_static: bool = False
    reason: str = ""

    @property
    def included(self) -> bool:
        return self.action != Action.SKIP


def classify(
    item, excluded_patterns: Sequence[str] = DEFAULT_EXCLUDED_PATTERNS
) -> Decision:
    """Decide whether (and as what) a grammar declaration enters the manifest."""
    if isinstance(item, GInclude):
        return Decision(Action.IMPORT)
    if isinstance(item, GStructIndicator):
        return Decision(Action.STRUCT_INDICATOR, is_public=True)
    if isinstance(item, GStructDecl):
        return Decision(Action.STRUCT, is_public=True)
    if isinstance(item, GEnumDecl):
        return Decision(Action.ENUM, is_public=True)
    if isinstance(item, GFunctionDecl):
        return _classify_function(item, excluded_patterns)
    return Decision(Action.SKIP, reason=f"unsupported declaration {type(item).__name__}")


def _classify_function(decl: GFunctionDecl, excluded_patterns: Sequence[str]) -> Decision:
    for pattern in excluded_patterns:
        if pattern and pattern in decl.name:
            return Decision(Action.SKIP, reason=f"lifecycle function (matches {pattern!r})")

    if decl.has_marker(GMarker.EXPORT_STATIC_METHOD):
        return Decision(Action.FUNCTION, is_public=True, is_static=True)
    if decl.has_marker(GMarker.EXPORT_METHOD):
        return Decision(Action.FUNCTION, is_public=True, is_static=False)
    if decl.has_marker(GMarker.EXPORT_STATIC_PROPERTY):
        return Decision(Action.PROPERTY, is_public=True, is_static=True)
    if decl.has_marker(GMarker.EXPORT_PROPERTY):
        return Decision(Action.PROPERTY, is_public=True, is_static=False)

    return Decision(Action.SKIP, reason="not exported")
