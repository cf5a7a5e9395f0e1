"""
Tests du rendu EPUB : fichiers générés, manifeste, spine et erreurs.
"""

import logging
import zipfile

import pytest
from ebooklib import epub

from ebook_renderer import (
    Book,
    BookOptions,
    ConfigurationError,
    ContentError,
    CoverFileError,
    EpubRenderer,
    EpubVersion,
    Number,
)
from ebook_renderer.book import tokens as t
from ebook_renderer.rendering.epub import cover_entry_name, cover_format, filenamer, to_id

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def h1(*children):
    return t.Header(1, tuple(t.Str(c) if isinstance(c, str) else c for c in children))


def para(text):
    return t.Paragraph((t.Str(text),))


def chapters(*titles):
    return [(Number.default(), [h1(title), para(f"Contenu de {title}")]) for title in titles]


def read_entry(path, name):
    with zipfile.ZipFile(path) as zf:
        return zf.read(name).decode("utf-8")


class TestHelpers:
    """Tests des fonctions utilitaires de nommage."""

    def test_filenamer(self):
        assert filenamer(0) == "chapter_000.xhtml"
        assert filenamer(12) == "chapter_012.xhtml"
        assert filenamer(999) == "chapter_999.xhtml"
        assert filenamer(1234) == "chapter_1234.xhtml"

    def test_to_id_values(self):
        assert to_id("a/b.c") == "a_b_c"
        assert to_id("chapter_000.xhtml") == "chapter_000_xhtml"

    @pytest.mark.parametrize("name", ["chapter_000.xhtml", "images/cover.png", "a.b/c.d", "plain"])
    def test_to_id(self, name):
        result = to_id(name)
        assert "." not in result
        assert "/" not in result
        assert to_id(result) == result

    def test_cover_format(self):
        assert cover_format("cover.png") == "png"
        assert cover_format("images/cover.JPG") == "jpeg"
        assert cover_format("cover.jpeg") == "jpeg"
        assert cover_format("cover.gif") == "gif"

    def test_cover_format_unknown_extension(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert cover_format("cover.webp") == "png"
        assert "cover.webp" in caplog.text

    def test_cover_entry_name(self, tmp_path):
        assert cover_entry_name("images/cover.png") == "images/cover.png"
        assert cover_entry_name(str(tmp_path / "cover.png")) == "cover.png"
        assert cover_entry_name("../shared/cover.png") == "cover.png"


class TestArchive:
    """Tests de la structure de l'archive EPUB."""

    def test_mimetype_first_and_stored(self, make_book, options):
        EpubRenderer(make_book(chapters("Un", "Deux"))).render_book()

        with zipfile.ZipFile(options.output_epub) as zf:
            infos = zf.infolist()
            assert infos[0].filename == "mimetype"
            assert infos[0].compress_type == zipfile.ZIP_STORED
            assert zf.read("mimetype") == b"application/epub+zip"
            assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in infos[1:])

    def test_expected_entries(self, make_book, options):
        message = EpubRenderer(make_book(chapters("Un", "Deux"))).render_book()

        assert str(options.output_epub) in message
        with zipfile.ZipFile(options.output_epub) as zf:
            names = zf.namelist()
        for name in [
            "chapter_000.xhtml",
            "chapter_001.xhtml",
            "stylesheet.css",
            "title_page.xhtml",
            "META-INF/container.xml",
            "META-INF/com.apple.ibooks.display-options.xml",
            "nav.xhtml",
            "content.opf",
            "toc.ncx",
        ]:
            assert name in names
        assert "cover.xhtml" not in names

    def test_explicit_output_path(self, make_book, tmp_path):
        target = tmp_path / "ailleurs" / "livre.epub"
        EpubRenderer(make_book(chapters("Un"))).render_book(target)
        assert target.exists()

    def test_missing_output_path(self, make_book, tmp_path):
        book = make_book(chapters("Un"), options=BookOptions(temp_dir=tmp_path / "work"))

        with pytest.raises(ConfigurationError):
            EpubRenderer(book).render_book()

        assert not (tmp_path / "work").exists()
        assert not list(tmp_path.rglob("*.epub"))

    def test_no_partial_file_on_error(self, make_book, options):
        book = make_book([(Number.default(), [para("Pas de titre")])])

        with pytest.raises(ContentError):
            EpubRenderer(book).render_book()

        assert not options.output_epub.exists()
        assert not list(options.temp_dir.iterdir())

    def test_render_twice(self, make_book, options):
        renderer = EpubRenderer(make_book(chapters("Un", "Deux")))
        renderer.render_book()
        first = read_entry(options.output_epub, "chapter_001.xhtml")
        renderer.render_book()
        assert read_entry(options.output_epub, "chapter_001.xhtml") == first
        assert renderer.state.toc == ["1. Un", "2. Deux"]

    def test_readable_by_ebooklib(self, make_book, options):
        book = make_book(chapters("Un", "Deux", "Trois"), options=options)
        options.epub_version = EpubVersion.V3
        EpubRenderer(book).render_book()

        parsed = epub.read_epub(str(options.output_epub))

        assert parsed.get_metadata("DC", "title")[0][0] == "Mon livre"
        assert parsed.get_metadata("DC", "creator")[0][0] == "Jeanne Auteur"
        chapter_files = [i.file_name for i in parsed.get_items() if i.file_name.startswith("chapter_")]
        assert chapter_files == [filenamer(0), filenamer(1), filenamer(2)]


class TestChapters:
    """Tests des titres de chapitres et de la table des matières."""

    def test_missing_title_with_numbering(self, make_book):
        renderer = EpubRenderer(make_book())
        renderer.state.enter_chapter(Number.default())

        with pytest.raises(ContentError) as exc_info:
            renderer.render_chapter([para("Pas de titre")])

        assert exc_info.value.chapter_index == 0

    def test_missing_title_reports_chapter_index(self, make_book):
        book = make_book(chapters("Un") + [(Number.default(), [para("Pas de titre")])])

        with pytest.raises(ContentError) as exc_info:
            EpubRenderer(book).render_book()

        assert exc_info.value.chapter_index == 1
        assert "Chapitre 1" in str(exc_info.value)

    def test_synthetic_title_without_numbering(self, make_book):
        renderer = EpubRenderer(make_book())
        renderer.state.enter_chapter(Number.unnumbered())

        first = renderer.render_chapter([para("Texte")])
        second = renderer.render_chapter([para("Texte")])

        assert first.title == "Chapter 1"
        assert second.title == "Chapter 2"
        assert "<title>Chapter 1</title>" in first.content
        assert renderer.state.toc == ["Chapter 1", "Chapter 2"]

    def test_numbering_disabled_globally(self, make_book, tmp_path):
        options = BookOptions(numbering=0, output_epub=tmp_path / "book.epub")
        book = make_book([(Number.default(), [para("Un")]), (Number.default(), [h1("Deux")])], options=options)

        renderer = EpubRenderer(book)
        renderer.render_book()

        assert renderer.state.toc == ["Chapter 1", "Deux"]

    def test_specified_then_default(self, make_book, options):
        book = make_book(
            [
                (Number.specified(5), [h1("Cinq")]),
                (Number.default(), [h1("Six")]),
            ]
        )
        renderer = EpubRenderer(book)
        renderer.render_book()

        assert renderer.state.toc == ["5. Cinq", "6. Six"]
        assert "<h1>5. Cinq</h1>" in read_entry(options.output_epub, "chapter_000.xhtml")

    def test_hidden_chapter(self, make_book, options):
        book = make_book(
            [
                (Number.default(), [h1("Un")]),
                (Number.hidden(), [h1("Secret"), para("Caché")]),
                (Number.default(), [h1("Deux")]),
            ]
        )
        renderer = EpubRenderer(book)
        renderer.render_book()

        assert renderer.state.toc == ["1. Un", "", "2. Deux"]
        nav = read_entry(options.output_epub, "nav.xhtml")
        ncx = read_entry(options.output_epub, "toc.ncx")
        opf = read_entry(options.output_epub, "content.opf")
        assert filenamer(1) not in nav
        assert filenamer(1) not in ncx
        assert f'<itemref idref="{to_id(filenamer(1))}" />' in opf
        assert "Caché" in read_entry(options.output_epub, filenamer(1))

    def test_parts(self, make_book):
        book = make_book(
            [
                (Number.default_part(), [h1("Origines")]),
                (Number.default(), [h1("Un")]),
                (Number.default_part(), [h1("Suite")]),
                (Number.default(), [h1("Deux")]),
            ]
        )
        renderer = EpubRenderer(book)
        renderer.render_book()

        assert renderer.state.toc == ["Part I: Origines", "2. Un", "Part III: Suite", "4. Deux"]

    def test_specified_part_then_default(self, make_book):
        """Le compteur reprend après le numéro forcé par SpecifiedPart(n)."""
        book = make_book(
            [
                (Number.specified_part(5), [h1("Partie")]),
                (Number.default(), [h1("Suite")]),
            ]
        )
        renderer = EpubRenderer(book)
        renderer.render_book()

        assert renderer.state.toc == ["Part V: Partie", "6. Suite"]

    def test_ncx_labels_are_plain_text(self, make_book, options):
        book = make_book([(Number.unnumbered(), [h1("Le ", t.Emphasis((t.Str("grand"),)), " départ")])])
        EpubRenderer(book).render_book()

        ncx = read_entry(options.output_epub, "toc.ncx")
        nav = read_entry(options.output_epub, "nav.xhtml")
        assert "<text>Le grand départ</text>" in ncx
        assert 'playOrder="1"' in ncx
        assert f'<a href="{filenamer(0)}">Le <em>grand</em> départ</a>' in nav


class TestMetadata:
    """Tests de content.opf et des métadonnées."""

    def test_manifest_and_spine(self, make_book, options):
        EpubRenderer(make_book(chapters("Un", "Deux", "Trois"))).render_book()

        parsed = epub.read_epub(str(options.output_epub))
        spine = [idref for idref, _ in parsed.spine]
        assert spine[:3] == [to_id(filenamer(i)) for i in range(3)]

    def test_metadata_is_escaped(self, make_book, options):
        book = make_book(chapters("Un"), title="Tom & Jerry", description="<b>Résumé</b>")
        EpubRenderer(book).render_book()

        opf = read_entry(options.output_epub, "content.opf")
        assert "<dc:title>Tom &amp; Jerry</dc:title>" in opf
        assert "&lt;b&gt;Résumé&lt;/b&gt;" in opf

    def test_same_identifier_in_opf_and_ncx(self, make_book, options):
        renderer = EpubRenderer(make_book(chapters("Un")))
        renderer.render_book()

        assert renderer.uuid.startswith("urn:uuid:")
        assert renderer.uuid in read_entry(options.output_epub, "content.opf")
        assert renderer.uuid in read_entry(options.output_epub, "toc.ncx")

    def test_epub3_nav(self, make_book, options):
        options.epub_version = EpubVersion.V3
        EpubRenderer(make_book(chapters("Un"))).render_book()

        assert 'epub:type="toc"' in read_entry(options.output_epub, "nav.xhtml")
        assert 'properties="nav"' in read_entry(options.output_epub, "content.opf")

    def test_stylesheet_override(self, make_book, options, tmp_path):
        (tmp_path / "style.css").write_text("body { color: red; }", encoding="utf-8")
        options.template_overrides = {"epub/stylesheet.css": "style.css"}
        EpubRenderer(make_book(chapters("Un"))).render_book()

        assert read_entry(options.output_epub, "stylesheet.css") == "body { color: red; }"


class TestCover:
    """Tests de la couverture."""

    @pytest.fixture
    def cover_book(self, make_book, tmp_path):
        (tmp_path / "images").mkdir()
        (tmp_path / "images" / "cover.png").write_bytes(PNG_BYTES)
        return make_book(chapters("Un", "Deux"), cover="images/cover.png")

    def test_spine_starts_with_cover(self, cover_book, options):
        EpubRenderer(cover_book).render_book()

        parsed = epub.read_epub(str(options.output_epub))
        spine = [idref for idref, _ in parsed.spine]
        assert spine[:3] == ["cover_xhtml", to_id(filenamer(0)), to_id(filenamer(1))]

    def test_manifest_items(self, cover_book, options):
        EpubRenderer(cover_book).render_book()

        parsed = epub.read_epub(str(options.output_epub))
        items = list(parsed.get_items())
        chapter_items = [i for i in items if i.file_name.startswith("chapter_")]
        image_items = [i for i in items if i.media_type.startswith("image/")]
        assert len(chapter_items) == 2
        assert len(image_items) == 1
        assert image_items[0].file_name == "images/cover.png"

    def test_cover_files(self, cover_book, options):
        EpubRenderer(cover_book).render_book()

        with zipfile.ZipFile(options.output_epub) as zf:
            assert zf.read("images/cover.png") == PNG_BYTES
            assert 'src="images/cover.png"' in zf.read("cover.xhtml").decode("utf-8")

    def test_epub2_cover_meta(self, cover_book, options):
        EpubRenderer(cover_book).render_book()

        opf = read_entry(options.output_epub, "content.opf")
        assert '<meta name="cover" content="images_cover_png" />' in opf
        assert 'properties="cover-image"' not in opf

    def test_epub3_cover_property(self, cover_book, options):
        options.epub_version = EpubVersion.V3
        EpubRenderer(cover_book).render_book()

        opf = read_entry(options.output_epub, "content.opf")
        assert 'properties="cover-image"' in opf

    def test_cover_outside_root(self, tmp_path):
        """Une couverture hors du répertoire du livre est rangée sous son nom de fichier."""
        (tmp_path / "shared").mkdir()
        (tmp_path / "shared" / "cover.png").write_bytes(PNG_BYTES)
        (tmp_path / "book").mkdir()
        output = tmp_path / "out.epub"
        book = Book(
            title="Mon livre",
            cover="../shared/cover.png",
            root=tmp_path / "book",
            options=BookOptions(output_epub=output),
        )
        book.add_chapter(Number.default(), [h1("Un")])

        EpubRenderer(book).render_book()

        with zipfile.ZipFile(output) as zf:
            assert zf.read("cover.png") == PNG_BYTES
            opf = zf.read("content.opf").decode("utf-8")
        assert 'href="cover.png"' in opf
        assert "../" not in opf

    def test_missing_cover(self, make_book, options):
        book = make_book(chapters("Un"), cover="absente.png")

        with pytest.raises(CoverFileError) as exc_info:
            EpubRenderer(book).render_book()

        assert exc_info.value.path.endswith("absente.png")
        assert isinstance(exc_info.value.__cause__, OSError)
        assert not options.output_epub.exists()
