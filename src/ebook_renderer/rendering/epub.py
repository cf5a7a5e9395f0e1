"""
Rendu d'un livre au format EPUB (2 ou 3).

Organisation de l'archive générée :
- mimetype (première entrée, non compressée)
- chapter_000.xhtml, chapter_001.xhtml... (un fichier par chapitre)
- stylesheet.css, title_page.xhtml
- META-INF/container.xml, META-INF/com.apple.ibooks.display-options.xml
- nav.xhtml, content.opf, toc.ncx
- cover.xhtml et l'image de couverture (si une couverture est configurée)
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path, PurePath, PurePosixPath
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from bs4 import BeautifulSoup
from markupsafe import Markup, escape
from tqdm import tqdm

from ..config import EpubVersion, TemplateNames
from ..exceptions import ConfigurationError, ContentError, CoverFileError
from ..logger import get_logger
from ..packaging import MIMETYPE_ENTRY, Zipper
from .html_emitter import HtmlEmitter
from .state import RendererState
from .traversal import ChapterRender, TreeWalker

if TYPE_CHECKING:
    from ..book import Book, Chapter
    from ..book.tokens import Token

logger = get_logger(__name__)

EPUB_MIMETYPE = b"application/epub+zip"

# Extension -> sous-type MIME de l'image de couverture
COVER_FORMATS = {
    "png": "png",
    "jpg": "jpeg",
    "jpeg": "jpeg",
    "gif": "gif",
}

NAV_POINT = """    <navPoint id="{id}" playOrder="{order}">
      <navLabel>
        <text>{label}</text>
      </navLabel>
      <content src="{src}" />
    </navPoint>
"""


def filenamer(index: int) -> str:
    """
    Nom du fichier d'un chapitre dans l'archive.

    Example:
        >>> filenamer(12)
        'chapter_012.xhtml'
    """
    return f"chapter_{index:03}.xhtml"


def to_id(name: str) -> str:
    """
    Identifiant interne valide dérivé d'un chemin ('.' et '/' remplacés par '_').

    Example:
        >>> to_id("images/cover.png")
        'images_cover_png'
    """
    return name.replace(".", "_").replace("/", "_")


def cover_format(cover: str) -> str:
    """
    Devine le sous-type MIME d'une image de couverture d'après son extension.

    Une extension inconnue (ou absente) produit un avertissement et "png".
    """
    extension = PurePath(cover).suffix.lstrip(".").lower()
    image_format = COVER_FORMATS.get(extension)
    if image_format is None:
        logger.warning(
            f"Couverture '{cover}' : format impossible à deviner d'après l'extension, png supposé"
        )
        return "png"
    return image_format


def cover_entry_name(cover: str) -> str:
    """
    Chemin de la couverture dans l'archive.

    Un chemin relatif est conservé tel quel ; un chemin absolu, ou qui sort
    du répertoire du livre (".."), est réduit au nom du fichier.
    """
    path = PurePath(cover)
    if path.is_absolute() or ".." in path.parts:
        return path.name
    return PurePosixPath(*path.parts).as_posix()


def plain_text(markup: str) -> str:
    """Texte d'un fragment de balisage, sans les balises ni les entités."""
    return BeautifulSoup(markup, "html.parser").get_text()


class EpubRenderer:
    """
    Rendu EPUB d'un livre, chapitre par chapitre, puis assemblage de l'archive.

    Un RendererState neuf est créé à chaque appel de render_book() : une même
    instance peut donc rendre plusieurs fois le livre, l'une après l'autre.

    Attributes:
        book: Livre à rendre
        version: Version du schéma EPUB
        state: État de la passe de rendu en cours
        walker: Parcours de l'arbre de tokens avec l'émetteur XHTML

    Example:
        >>> renderer = EpubRenderer(book)
        >>> renderer.render_book("out/livre.epub")
        'out/livre.epub (20481 octets)'
    """

    format_name = "EPUB"

    def __init__(self, book: "Book"):
        self.book = book
        self.version: EpubVersion = book.options.epub_version
        self._reset()

    def _reset(self) -> None:
        numbering = 1 if self.book.options.numbering >= 1 else 0
        self.state = RendererState(
            default_numbering=numbering,
            specified_numbering=numbering,
            supports_parts=True,
            format_name=self.format_name,
        )
        self.walker = TreeWalker(self.book, HtmlEmitter(), self.state)
        self.uuid = uuid.uuid4().urn
        self.date = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    # -----------------------------------
    # 🔹 Livre complet
    # -----------------------------------
    def render_book(self, path: Optional[str | Path] = None) -> str:
        """
        Rend le livre et génère le fichier EPUB.

        Args:
            path: Fichier de sortie (défaut: options.output_epub)

        Returns:
            Message décrivant l'archive générée

        Raises:
            ConfigurationError: Si aucun fichier de sortie n'est configuré
            ContentError: Si un chapitre n'a pas de titre alors que la
                numérotation est active
            CoverFileError: Si la couverture est absente ou illisible
            RenderError: Pour toute autre erreur de template ou d'archive
        """
        output = path if path is not None else self.book.options.output_epub
        if output is None:
            raise ConfigurationError(
                "Aucun fichier EPUB de sortie spécifié dans la configuration du livre"
            )

        self._reset()
        book = self.book
        templates = book.templates

        with Zipper(book.options.temp_dir) as zipper:
            zipper.write(MIMETYPE_ENTRY, EPUB_MIMETYPE, compress=False)

            for index, chapter in enumerate(self._iter_chapters()):
                self.state.enter_chapter(chapter.number)
                rendered = self.render_chapter(chapter.content)
                zipper.write(filenamer(index), rendered.content.encode("utf-8"))

            zipper.write(
                "stylesheet.css", book.get_template(TemplateNames.Epub_Css).encode("utf-8")
            )
            zipper.write("title_page.xhtml", self.render_titlepage())

            zipper.write(
                "META-INF/com.apple.ibooks.display-options.xml",
                templates.get_source(TemplateNames.Epub_Ibooks).encode("utf-8"),
            )
            zipper.write(
                "META-INF/container.xml",
                templates.get_source(TemplateNames.Epub_Container).encode("utf-8"),
            )
            zipper.write("nav.xhtml", self.render_nav())
            zipper.write("content.opf", self.render_opf())
            zipper.write("toc.ncx", self.render_toc())

            if book.cover:
                zipper.write(cover_entry_name(book.cover), self._read_cover(book.cover))
                zipper.write("cover.xhtml", self.render_cover())

            return zipper.generate_epub(output)

    def _iter_chapters(self) -> Iterable["Chapter"]:
        return tqdm(
            self.book.chapters,
            desc="Rendu EPUB",
            unit="chapitre",
            disable=not self.book.options.show_progress,
        )

    def _read_cover(self, cover: str) -> bytes:
        path = self.book.root / cover
        try:
            return path.read_bytes()
        except OSError as err:
            raise CoverFileError(path, err.strerror or str(err)) from err

    def _render(self, template_name: str, **params) -> bytes:
        data = self.book.get_metadata()
        data.update(params)
        return self.book.templates.render(
            self.book.get_template(template_name), template_name, **data
        )

    # -----------------------------------
    # 🔹 Chapitres
    # -----------------------------------
    def render_chapter(self, tokens: Iterable["Token"]) -> ChapterRender:
        """
        Rend un chapitre en document XHTML complet et ajoute son titre à la TOC.

        La directive Number du chapitre doit déjà être appliquée à self.state.
        Sans titre de niveau 1, un chapitre numéroté est une erreur ; un
        chapitre non numéroté reçoit le titre "Chapter N". Un chapitre masqué
        garde un titre vide.

        Returns:
            ChapterRender(document XHTML, titre retenu)

        Raises:
            ContentError: Chapitre sans titre alors que la numérotation est active
        """
        result = self.walker.render_chapter(tokens)
        title = result.title

        if not title and not self.state.current_hide:
            if self.state.numbering_enabled:
                raise ContentError(
                    "chapitre sans titre de niveau 1 alors que la numérotation est active",
                    chapter_index=len(self.state.toc),
                )
            title = f"Chapter {self.state.next_chapter_number()}"

        self.state.toc.append(title)

        document = self._render(
            TemplateNames.Epub_Chapter,
            content=Markup(result.content),
            chapter_title=Markup(title),
        )
        return ChapterRender(content=document.decode("utf-8"), title=title)

    def _visible_toc(self) -> Iterator[tuple[int, str]]:
        """Entrées (index, titre) de la TOC, sans les chapitres masqués."""
        for index, title in enumerate(self.state.toc):
            if title:
                yield index, title

    # -----------------------------------
    # 🔹 Fichiers annexes
    # -----------------------------------
    def render_titlepage(self) -> bytes:
        return self._render(self.version.templates.title_page)

    def render_nav(self) -> bytes:
        """Rend nav.xhtml : un lien par chapitre visible, vers son fichier."""
        content = "".join(
            f'        <li><a href="{filenamer(index)}">{title}</a></li>\n'
            for index, title in self._visible_toc()
        )
        return self._render(self.version.templates.nav, content=Markup(content))

    def render_toc(self) -> bytes:
        """Rend toc.ncx : un navPoint par chapitre visible, dans l'ordre."""
        nav_points = []
        for index, title in self._visible_toc():
            nav_points.append(
                NAV_POINT.format(
                    id=f"navPoint-{index + 1}",
                    order=len(nav_points) + 1,
                    label=escape(plain_text(title)),
                    src=filenamer(index),
                )
            )
        return self._render(
            TemplateNames.Epub_Toc, nav_points=Markup("".join(nav_points)), uuid=self.uuid
        )

    def render_opf(self) -> bytes:
        """
        Rend content.opf : métadonnées, manifeste et spine.

        Le manifeste déclare chaque fichier de chapitre dans l'ordre, plus
        cover.xhtml et l'image de couverture le cas échéant. Le spine
        commence par la couverture, suivie des chapitres dans l'ordre.
        """
        book = self.book
        optional = []
        items = []
        itemrefs = []
        cover_xhtml = ""
        coverref = ""

        if book.description:
            optional.append(f"    <dc:description>{escape(book.description)}</dc:description>\n")
        if book.subject:
            optional.append(f"    <dc:subject>{escape(book.subject)}</dc:subject>\n")

        if book.cover:
            entry = cover_entry_name(book.cover)
            optional.append(f'    <meta name="cover" content="{to_id(entry)}" />\n')
            cover_xhtml = '    <reference type="cover" title="Cover" href="cover.xhtml" />\n'
            coverref = '    <itemref idref="cover_xhtml" />\n'
            items.append(
                '    <item id="cover_xhtml" href="cover.xhtml" media-type="application/xhtml+xml" />\n'
            )

        for index in range(len(self.state.toc)):
            filename = filenamer(index)
            items.append(
                f'    <item id="{to_id(filename)}" href="{filename}" '
                f'media-type="application/xhtml+xml" />\n'
            )
            itemrefs.append(f'    <itemref idref="{to_id(filename)}" />\n')

        if book.cover:
            entry = cover_entry_name(book.cover)
            properties = ' properties="cover-image"' if self.version is EpubVersion.V3 else ""
            items.append(
                f'    <item id="{to_id(entry)}" href="{escape(entry)}" '
                f'media-type="image/{cover_format(book.cover)}"{properties} />\n'
            )

        return self._render(
            self.version.templates.opf,
            optional=Markup("".join(optional)),
            items=Markup("".join(items)),
            itemrefs=Markup("".join(itemrefs)),
            date=self.date,
            uuid=self.uuid,
            cover_xhtml=Markup(cover_xhtml),
            coverref=Markup(coverref),
        )

    def render_cover(self) -> bytes:
        """Rend cover.xhtml (uniquement appelé si une couverture est configurée)."""
        assert self.book.cover is not None
        return self._render(
            self.version.templates.cover, cover=cover_entry_name(self.book.cover)
        )
