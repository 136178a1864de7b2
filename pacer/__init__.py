# pacer/__init__.py
"""
verse-pacer: resolve spoken or typed scripture references to verses.
"""

__version__ = "0.1.0"
