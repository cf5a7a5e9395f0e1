"""
Génération des archives (EPUB, ODT) à partir d'un répertoire de travail.
"""

from .zipper import MIMETYPE_ENTRY, Zipper

__all__ = [
    "MIMETYPE_ENTRY",
    "Zipper",
]
