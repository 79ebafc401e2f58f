"""
Shared infrastructure: configuration-aware logging, database sessions and errors.
"""
