"""
Configuration pytest pour les tests ebook-renderer.

Ce fichier contient les fixtures communes à tous les tests.
"""

import os
import tempfile

# Les logs de session des tests ne doivent pas atterrir dans ./logs
os.environ.setdefault("EBOOK_RENDERER_LOG_DIR", tempfile.mkdtemp(prefix="ebook_renderer_logs_"))

import pytest

from ebook_renderer import Book, BookOptions


@pytest.fixture
def options(tmp_path):
    """
    Fixture fournissant des options de rendu avec des sorties dans tmp_path.

    Returns:
        BookOptions (EPUB 2, numérotation active)
    """
    return BookOptions(
        output_epub=tmp_path / "out" / "book.epub",
        output_odt=tmp_path / "out" / "book.odt",
        temp_dir=tmp_path / "work",
    )


@pytest.fixture
def make_book(tmp_path, options):
    """
    Fixture fabriquant un Book à partir d'une liste (Number, tokens).

    Example:
        >>> book = make_book([(Number.default(), [Header(1, (Str("Début"),))])])
    """

    def factory(chapters=(), **kwargs):
        kwargs.setdefault("options", options)
        kwargs.setdefault("title", "Mon livre")
        kwargs.setdefault("author", "Jeanne Auteur")
        book = Book(root=tmp_path, **kwargs)
        for number, content in chapters:
            book.add_chapter(number, content)
        return book

    return factory
