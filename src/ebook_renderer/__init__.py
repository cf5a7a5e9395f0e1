"""
Rendu de livres au format EPUB (2 et 3) et OpenDocument Text.

Ebook Renderer convertit un livre déjà analysé (arbre de tokens par
chapitre + métadonnées) en archive EPUB ou ODT.

Le processus de rendu :
1. Applique la directive de numérotation de chaque chapitre
2. Parcourt l'arbre de tokens et produit le balisage du format cible
3. Génère les fichiers annexes (OPF, NCX, nav, page de titre, couverture)
4. Assemble l'archive (mimetype en premier, non compressé)

Organisation du package :
- book/ : Modèle du livre (tokens, numérotation, options)
- rendering/ : Parcours des tokens, émetteurs et renderers EPUB / ODT
- packaging/ : Répertoire de travail et génération des archives
- template_renderer.py : Templates Jinja2 intégrés ou surchargés
- exceptions.py : Erreurs de rendu
- logger.py : Logs console / fichier par session

Exports publics :
    Classes principales :
        - Book, BookOptions, Chapter, Number : Modèle du livre
        - EpubRenderer, OdtRenderer : Rendu des deux formats
        - Zipper : Génération des archives

    Exceptions :
        - RenderError et ses sous-classes

Example:
    >>> from ebook_renderer import Book, BookOptions, EpubRenderer, Number
    >>> from ebook_renderer.book import tokens as t
    >>> book = Book(title="Mon livre", author="Moi", options=BookOptions(output_epub="livre.epub"))
    >>> book.add_chapter(Number.default(), [t.Header(1, (t.Str("Début"),))])
    >>> EpubRenderer(book).render_book()
"""

from .book import Book, BookOptions, Chapter, Number, NumberKind
from .config import EpubVersion
from .exceptions import (
    ConfigurationError,
    ContentError,
    CoverFileError,
    PackagingError,
    RenderError,
    TemplateEncodingError,
    TemplateError,
)
from .packaging import Zipper
from .rendering import EpubRenderer, OdtRenderer
from .template_renderer import TemplateRenderer

__version__ = "0.1.0"

__all__ = [
    # Modèle
    "Book",
    "BookOptions",
    "Chapter",
    "Number",
    "NumberKind",
    "EpubVersion",
    # Rendu
    "EpubRenderer",
    "OdtRenderer",
    "TemplateRenderer",
    "Zipper",
    # Exceptions
    "RenderError",
    "ConfigurationError",
    "ContentError",
    "CoverFileError",
    "TemplateError",
    "TemplateEncodingError",
    "PackagingError",
]
