"""
Rendu d'un livre au format OpenDocument Text.

Le document est construit à partir d'une archive ODT de base intégrée au
paquet (styles, manifeste, métadonnées) dont seul content.xml est remplacé.
"""

from pathlib import Path
from typing import Optional

from markupsafe import Markup
from tqdm import tqdm

from ..book import Book
from ..config import TemplateNames
from ..exceptions import ConfigurationError
from ..logger import get_logger
from ..packaging import Zipper
from .odt_emitter import AUTOMATIC_STYLES, OdtEmitter
from .state import RendererState
from .traversal import ChapterRender, TreeWalker

logger = get_logger(__name__)

BASE_ARCHIVE = "template.odt"

# Fonctionnalités du livre ignorées (ou appauvries) dans le rendu ODT
UNSUPPORTED_FEATURES = {
    "image": "images",
    "blockquote": "citations",
    "codeblock": "blocs de code",
    "ordered_list": "listes numérotées",
    "footnote": "notes de bas de page",
    "table": "tableaux",
    "superscript": "exposants",
    "subscript": "indices",
}


class OdtRenderer:
    """
    Rendu ODT d'un livre : tous les chapitres dans un seul content.xml.

    L'ODT ne gère pas les parties : une directive de partie est traitée
    comme la directive de chapitre correspondante, avec un avertissement.
    """

    format_name = "ODT"

    def __init__(self, book: Book):
        self.book = book
        self._reset()

    def _reset(self) -> None:
        options = self.book.options
        self.state = RendererState(
            default_numbering=options.num_depth,
            specified_numbering=options.numbering,
            supports_parts=False,
            format_name=self.format_name,
        )
        self.emitter = OdtEmitter()
        self.walker = TreeWalker(self.book, self.emitter, self.state)

    def missing_features(self) -> list[str]:
        """Libellés des fonctionnalités utilisées par le livre mais non rendues en ODT."""
        used = self.book.features.used()
        return [label for name, label in UNSUPPORTED_FEATURES.items() if name in used]

    def render_book(self, path: Optional[str | Path] = None) -> str:
        """
        Rend le livre et génère le fichier ODT.

        Args:
            path: Fichier de sortie (défaut: options.output_odt)

        Returns:
            Message décrivant l'archive générée

        Raises:
            ConfigurationError: Si aucun fichier de sortie n'est configuré
            RenderError: Pour toute erreur de template ou d'archive
        """
        output = path if path is not None else self.book.options.output_odt
        if output is None:
            raise ConfigurationError(
                "Aucun fichier ODT de sortie spécifié dans la configuration du livre"
            )

        content = self.render_content()
        templates = self.book.templates

        with Zipper(self.book.options.temp_dir) as zipper:
            zipper.write(BASE_ARCHIVE, templates.get_binary(TemplateNames.Odt_Base_Archive))
            zipper.unzip(BASE_ARCHIVE)
            zipper.write("content.xml", content)
            return zipper.generate_odt(output)

    def render_content(self) -> bytes:
        """Rend content.xml : titre, auteur puis le corps de tous les chapitres."""
        self._reset()

        missing = self.missing_features()
        if missing:
            logger.warning(
                "ODT : le document utilise des fonctionnalités non gérées dans ce format : "
                f"{', '.join(missing)}. Elles seront ignorées dans le document généré."
            )

        body = []
        chapters = tqdm(
            self.book.chapters,
            desc="Rendu ODT",
            unit="chapitre",
            disable=not self.book.options.show_progress,
        )
        for chapter in chapters:
            self.state.enter_chapter(chapter.number)
            rendered = self.render_chapter(chapter.content)
            body.append(rendered.content)

        data = self.book.get_metadata()
        data.update(
            content=Markup("".join(body)),
            automatic_styles=Markup(AUTOMATIC_STYLES),
        )
        return self.book.templates.render(
            self.book.get_template(TemplateNames.Odt_Content), TemplateNames.Odt_Content, **data
        )

    def render_chapter(self, tokens) -> ChapterRender:
        """Rend le corps d'un chapitre ; un chapitre sans titre est accepté."""
        result = self.walker.render_chapter(tokens)
        self.state.toc.append(result.title)
        return result
