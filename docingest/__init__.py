"""
DocIngest: turns per-folder file drops into organized, delivered documents.
"""

__version__ = "0.1.0"
