"""File manifest assembler — one header's declarations into one FileInfo.

The assembler walks declarations in source order. The policy decides what
each one becomes, a converter builds the record, and the record is appended
to the matching collection. A declaration that fails to convert is skipped
and reported as an ExtractionIssue; the rest of the header still goes through.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

from cmanifest.grammar.models import GEnumDecl
from cmanifest.ir.converters import (
    convert_enum,
    convert_import,
    convert_method,
    convert_property,
    convert_struct,
    convert_struct_indicator,
)
from cmanifest.ir.errors import ManifestError
from cmanifest.ir.models import ExtractionIssue, FileInfo
from cmanifest.ir.policy import DEFAULT_EXCLUDED_PATTERNS, Action, classify
from cmanifest.logging import get_logger

logger = get_logger("assembler")


class AssemblerState(Enum):
    START = "start"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


class FileManifestAssembler:
    """Accumulates the manifest of a single header."""

    def __init__(
        self,
        name: str,
        enum_names: Iterable[str] = (),
        excluded_patterns: Sequence[str] = DEFAULT_EXCLUDED_PATTERNS,
    ):
        self.name = name
        self.enum_names = frozenset(enum_names)
        self.excluded_patterns = tuple(excluded_patterns)
        self.state = AssemblerState.START
        self.issues: list[ExtractionIssue] = []

        self._imports: list = []
        self._structs: list = []
        self._enums: list = []
        self._functions: list = []
        self._properties: list = []
        self._result: FileInfo | None = None

    def feed(self, item) -> bool:
        """Process one declaration. Returns True if a record was appended."""
        if self.state == AssemblerState.FINALIZED:
            raise RuntimeError(f"Manifest for {self.name} is already finalized")
        self.state = AssemblerState.ACCUMULATING

        decision = classify(item, self.excluded_patterns)
        if not decision.included:
            logger.debug("%s: skipping %s (%s)", self.name, _describe(item), decision.reason)
            return False

        try:
            self._append(decision.action, item)
        except ManifestError as e:
            issue = ExtractionIssue(
                header=self.name,
                declaration=e.declaration or _describe(item),
                code=e.code,
                message=e.message,
            )
            self.issues.append(issue)
            logger.warning("Skipped declaration: %s", issue)
            return False
        return True

    def feed_all(self, items: Iterable) -> None:
        for item in items:
            self.feed(item)

    def finalize(self) -> FileInfo:
        """Freeze the manifest. Further calls return the same FileInfo."""
        if self._result is None:
            self._result = FileInfo(
                name=self.name,
                imports=tuple(self._imports),
                structs=tuple(self._structs),
                enums=tuple(self._enums),
                functions=tuple(self._functions),
                properties=tuple(self._properties),
            )
            self.state = AssemblerState.FINALIZED
        return self._result

    def _append(self, action: Action, item) -> None:
        if action == Action.IMPORT:
            self._imports.append(convert_import(item))
        elif action == Action.STRUCT_INDICATOR:
            self._structs.append(convert_struct_indicator(item))
        elif action == Action.STRUCT:
            self._structs.append(convert_struct(item, self.enum_names))
        elif action == Action.ENUM:
            self._enums.append(convert_enum(item))
        elif action == Action.FUNCTION:
            self._functions.append(convert_method(item, self.name, self.enum_names))
        elif action == Action.PROPERTY:
            self._properties.append(convert_property(item, self.name, self.enum_names))


def assemble_file(
    name: str,
    items: Sequence,
    excluded_patterns: Sequence[str] = DEFAULT_EXCLUDED_PATTERNS,
) -> tuple[FileInfo, list[ExtractionIssue]]:
    """Build the manifest for one header in a single pass.

    Enum names declared anywhere in the header are collected first so type
    references to them resolve to Enum variants regardless of order.
    """
    enum_names = [i.name for i in items if isinstance(i, GEnumDecl) and i.name]
    assembler = FileManifestAssembler(name, enum_names, excluded_patterns)
    assembler.feed_all(items)
    return assembler.finalize(), assembler.issues


def _describe(item) -> str:
    return getattr(item, "name", None) or getattr(item, "path", None) or type(item).__name__
