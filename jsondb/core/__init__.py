"""
Core utilities shared across jsondb.

This package hosts:
- configuration helpers (env vars, database path, output format)
- the clock and id collaborators used when records are created
- logging setup for entry points

Storage and service modules depend on these primitives instead of reading
os.environ or calling datetime/uuid directly.
"""
