"""
Rendu des livres vers les formats de sortie.

Organisation du module :
- state.py : État de la passe de rendu (numérotation, TOC)
- emitter.py : Interface des émetteurs de balisage
- traversal.py : Parcours de l'arbre de tokens, commun aux formats
- html_emitter.py / odt_emitter.py : Balisage XHTML et OpenDocument
- epub.py / odt.py : Assemblage des archives EPUB et ODT
"""

from .emitter import LeafEmitter
from .epub import EpubRenderer, filenamer, to_id
from .html_emitter import HtmlEmitter
from .odt import OdtRenderer
from .odt_emitter import OdtEmitter
from .state import RendererState
from .traversal import ChapterRender, TreeWalker

__all__ = [
    "LeafEmitter",
    "EpubRenderer",
    "filenamer",
    "to_id",
    "HtmlEmitter",
    "OdtRenderer",
    "OdtEmitter",
    "RendererState",
    "ChapterRender",
    "TreeWalker",
]
