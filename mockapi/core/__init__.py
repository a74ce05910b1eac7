"""
Core utilities shared across the mock API.

This package hosts configuration helpers (env vars, paths, collection
registry) and cross-cutting services such as logging. Services and routers
depend on these primitives instead of reading os.environ directly.
"""
