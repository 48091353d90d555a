"""
High-level use cases for jsondb.

The Store service orchestrates the JSON storage adapter to implement the
user and post operations. Callers should go through it instead of reading or
writing the document file directly.
"""
