"""
GridFS Cleaner

Finds chunks in a GridFS bucket whose file metadata record no longer
exists and deletes them (or, in dry-run mode, reports what would go).
"""

__version__ = "1.0.0"
