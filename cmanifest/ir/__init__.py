"""Canonical manifest IR for C headers.

The IR normalizes what downstream binding generators operate on:
- Types (primitive scalars or named struct/enum references, plus flags)
- Declarations (structs, enums, functions, properties, imports)
- One FileInfo per header, in source order
"""
