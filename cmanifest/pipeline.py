"""Extraction pipeline — headers in, one manifest artifact per header out.

Headers are processed one at a time in sorted path order. A bad declaration
skips only itself; a header whose name cannot be derived or whose artifact
cannot be written skips only that header.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePath

from cmanifest.config import ManifestConfig
from cmanifest.emitter import ManifestEmitter
from cmanifest.grammar.models import HeaderDirectory
from cmanifest.ir.assembler import assemble_file
from cmanifest.ir.errors import BadImport, ManifestWriteError
from cmanifest.ir.models import ExtractionReport, FileInfo, FileResult
from cmanifest.logging import get_logger

logger = get_logger("pipeline")

HEADER_SUFFIX = ".h"


def derive_file_name(path: str | PurePath) -> str:
    """Header base name: no directories, no ``.h`` extension.

    Raises:
        BadImport: The path does not name a header file.
    """
    name = PurePath(str(path).replace("\\", "/")).name
    if not name.endswith(HEADER_SUFFIX):
        raise BadImport(f"Not a header file: {path}", str(path))
    stem = name[: -len(HEADER_SUFFIX)]
    if not stem:
        raise BadImport(f"Header has an empty name: {path}", str(path))
    return stem


def extract_header(
    path: str | PurePath,
    items: Sequence,
    config: ManifestConfig | None = None,
) -> FileResult:
    """Build (but do not write) the manifest for one header."""
    config = config or ManifestConfig()
    result = FileResult(path=str(path))
    try:
        result.name = derive_file_name(path)
    except BadImport as e:
        result.error = f"[{e.code}] {e.message}"
        logger.error("Skipping header %s: %s", path, e.message)
        return result

    file_info, issues = assemble_file(result.name, items, config.excluded_patterns)
    result.file_info = file_info
    result.issues = issues
    return result


def process_header_dir(
    directory: HeaderDirectory,
    config: ManifestConfig | None = None,
    emitter: ManifestEmitter | None = None,
) -> ExtractionReport:
    """Extract and emit a manifest for every header in ``directory``."""
    config = config or ManifestConfig()
    emitter = emitter or ManifestEmitter(config.output_dir, config.format, config.indent)
    report = ExtractionReport()
    seen: dict[str, str] = {}

    for path in directory.paths():
        result = extract_header(path, directory.headers[path], config)
        report.results.append(result)
        if not result.ok:
            continue

        # Two headers with the same base name would overwrite each other's artifact
        if result.name in seen:
            result.error = (
                f"[DUPLICATE_NAME] {result.name} already emitted from {seen[result.name]}"
            )
            logger.error("Skipping header %s: %s", path, result.error)
            continue
        seen[result.name] = result.path

        try:
            result.artifact = str(emitter.emit(result.file_info))
        except ManifestWriteError as e:
            result.error = str(e)
            logger.error("Skipping header %s: %s", path, e)
            continue

        logger.info(
            "%s: %d struct(s), %d enum(s), %d function(s), %d property(ies)",
            result.name,
            len(result.file_info.structs),
            len(result.file_info.enums),
            len(result.file_info.functions),
            len(result.file_info.properties),
        )

    logger.debug(report.summary())
    return report


def build_manifests(
    directory: HeaderDirectory, config: ManifestConfig | None = None
) -> dict[str, FileInfo]:
    """Build every manifest in memory, keyed by header name, without writing."""
    manifests: dict[str, FileInfo] = {}
    for path in directory.paths():
        result = extract_header(path, directory.headers[path], config)
        if result.ok and result.name not in manifests:
            manifests[result.name] = result.file_info
    return manifests

