"""
Persistence adapters.

These modules encapsulate how the document is stored/retrieved (today a single
JSON file). Services depend on the adapter instead of touching the file.
"""
