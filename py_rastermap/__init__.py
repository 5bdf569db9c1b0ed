"""
Import terrain features onto a tile grid from PNG and BMP images.
"""

__version__ = "0.1.0"
