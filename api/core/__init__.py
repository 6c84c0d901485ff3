"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks features share (DB pool, settings,
error kinds). Table-specific SQL lives in the feature package (`cities/`).
"""
