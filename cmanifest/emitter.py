"""Manifest emitter — writes one artifact per header.

Artifacts are pretty-printed and keep every collection in source order so
they diff cleanly when versioned alongside the headers.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from cmanifest.ir.errors import ManifestWriteError
from cmanifest.ir.models import FileInfo
from cmanifest.logging import get_logger

logger = get_logger("emitter")

FORMATS = {"json": "json", "yaml": "yaml"}


class ManifestEmitter:
    """Serializes FileInfo manifests into an output directory."""

    def __init__(self, output_dir: str | Path = "out", fmt: str = "json", indent: int = 2):
        if fmt not in FORMATS:
            raise ValueError(f"Unknown manifest format {fmt!r}. Must be one of: {sorted(FORMATS)}")
        self.output_dir = Path(output_dir)
        self.fmt = fmt
        self.indent = indent

    def artifact_path(self, file_info: FileInfo) -> Path:
        return self.output_dir / f"{file_info.name}.{FORMATS[self.fmt]}"

    def render(self, file_info: FileInfo) -> str:
        data = file_info.to_dict()
        if self.fmt == "yaml":
            return yaml.safe_dump(
                data, sort_keys=False, default_flow_style=False, indent=self.indent
            )
        return json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n"

    def emit(self, file_info: FileInfo) -> Path:
        """Write the manifest, replacing any previous artifact of the same name.

        Raises:
            ManifestWriteError: The artifact could not be written.
        """
        path = self.artifact_path(file_info)
        content = self.render(file_info)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
        except OSError as e:
            raise ManifestWriteError(path, e) from e

        logger.debug("Wrote %s", path)
        return path
