"""
Modèle du livre consommé par les renderers.

Organisation du module :
- tokens.py : Arbre de tokens (lecture seule) et détection des fonctionnalités
- number.py : Directive de numérotation des chapitres
- book.py : Chapitres, options et collaborateur Book
"""

from . import tokens
from .book import Book, BookOptions, Chapter, to_roman
from .number import Number, NumberKind
from .tokens import Features, Token, collect_features

__all__ = [
    "tokens",
    "Book",
    "BookOptions",
    "Chapter",
    "Number",
    "NumberKind",
    "Features",
    "Token",
    "collect_features",
    "to_roman",
]
