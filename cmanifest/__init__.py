"""cmanifest — C header manifest extractor.

Turns parsed C header declarations into per-header manifests that
template-based binding generators consume.
"""

__version__ = "0.1.0"
