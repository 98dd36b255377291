"""
Frontend: textual location notation.
"""

from .parser import Parser, parse_location
from .transformer import LocationTransformer
