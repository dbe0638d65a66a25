"""
Quran Bookmarks - bookmark list building and bulk deletion for a Quran reader.
"""

__version__ = "1.0.0"
