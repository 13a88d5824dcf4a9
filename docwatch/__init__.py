"""
docwatch

Keeps MongoDB metadata collections in sync with a watched directory tree.
"""

__version__ = "0.1.0"
