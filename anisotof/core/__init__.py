"""Internal implementation package for anisotof.

Modules here may change between releases; import public symbols from the
top-level ``anisotof`` package instead.
"""
