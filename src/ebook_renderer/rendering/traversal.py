"""
Parcours de l'arbre de tokens, commun à tous les formats de sortie.

Le TreeWalker gère tout ce qui dépend de l'état de rendu (titres de niveau 1,
numérotation, masquage, titre du chapitre) et délègue le balisage à un
LeafEmitter propre au format.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from ..book.tokens import (
    Annotation,
    BlockQuote,
    Code,
    CodeBlock,
    DescriptionDetails,
    DescriptionItem,
    DescriptionList,
    DescriptionTerm,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    HardBreak,
    Header,
    Image,
    Item,
    Link,
    List,
    OrderedList,
    Paragraph,
    Rule,
    SoftBreak,
    StandaloneImage,
    Str,
    Strikethrough,
    Strong,
    Subscript,
    Superscript,
    Table,
    TableCell,
    TableHead,
    TableRow,
    TaskItem,
    Token,
)
from ..logger import get_logger

if TYPE_CHECKING:
    from ..book import Book
    from .emitter import LeafEmitter
    from .state import RendererState

logger = get_logger(__name__)


@dataclass
class ChapterRender:
    """
    Résultat du rendu d'un chapitre.

    Attributes:
        content: Balisage du corps du chapitre
        title: Texte rendu du premier titre de niveau 1 ("" s'il n'y en a pas)
    """

    content: str
    title: str


class TreeWalker:
    """
    Rend des séquences de tokens avec un émetteur donné.

    Attributes:
        book: Livre (fournit le rendu des titres numérotés)
        emitter: Émetteur de balisage du format cible
        state: État de la passe de rendu, muté pendant le parcours
    """

    def __init__(self, book: "Book", emitter: "LeafEmitter", state: "RendererState"):
        self.book = book
        self.emitter = emitter
        self.state = state
        self._title: Optional[str] = None

    def render_chapter(self, tokens: Iterable[Token]) -> ChapterRender:
        """
        Rend le corps d'un chapitre et détermine son titre.

        La directive Number du chapitre doit déjà avoir été appliquée à l'état
        (RendererState.enter_chapter). La TOC n'est pas modifiée ici : c'est
        au renderer de format de décider du titre final.
        """
        self._title = None
        content = self.render_vec(tokens)
        return ChapterRender(content=content, title=self._title or "")

    def render_vec(self, tokens: Iterable[Token]) -> str:
        return "".join(self.render_token(token) for token in tokens)

    def render_token(self, token: Token) -> str:
        emit = self.emitter
        match token:
            case Str(text=text):
                return emit.text(text)
            case Code(text=text):
                return emit.code(text)
            case CodeBlock(language=language, text=text):
                return emit.code_block(language, text)
            case SoftBreak():
                return emit.soft_break()
            case HardBreak():
                return emit.hard_break()
            case Rule():
                return emit.rule()
            case FootnoteReference(reference=reference):
                return emit.footnote_reference(reference)
            case Header(level=1, children=children):
                return self._render_title(children)
            case Header(level=level, children=children):
                return emit.header(level, self.render_vec(children))
            case Paragraph(children=children):
                return emit.paragraph(self.render_vec(children))
            case Emphasis(children=children):
                return emit.emphasis(self.render_vec(children))
            case Strong(children=children):
                return emit.strong(self.render_vec(children))
            case Strikethrough(children=children):
                return emit.strikethrough(self.render_vec(children))
            case List(children=children):
                return emit.unordered_list(self.render_vec(children))
            case OrderedList(start=start, children=children):
                return emit.ordered_list(start, self.render_vec(children))
            case Item(children=children):
                return emit.item(self.render_vec(children))
            case TaskItem(checked=checked, children=children):
                return emit.task_item(checked, self.render_vec(children))
            case DescriptionList(children=children):
                return emit.description_list(self.render_vec(children))
            case DescriptionItem(children=children):
                return emit.description_item(self.render_vec(children))
            case DescriptionTerm(children=children):
                return emit.description_term(self.render_vec(children))
            case DescriptionDetails(children=children):
                return emit.description_details(self.render_vec(children))
            case Link(url=url, title=title, children=children):
                return emit.link(url, title, self.render_vec(children))
            case BlockQuote(children=children):
                return emit.block_quote(self.render_vec(children))
            case Image(url=url, title=title, children=children):
                return emit.image(url, title, self.render_vec(children), standalone=False)
            case StandaloneImage(url=url, title=title, children=children):
                return emit.image(url, title, self.render_vec(children), standalone=True)
            case Subscript(children=children):
                return emit.subscript(self.render_vec(children))
            case Superscript(children=children):
                return emit.superscript(self.render_vec(children))
            case Table(columns=columns, children=children):
                return emit.table(columns, self.render_vec(children))
            case TableHead(children=children):
                return emit.table_head(self.render_vec(children))
            case TableRow(children=children):
                return emit.table_row(self.render_vec(children))
            case TableCell(children=children):
                return emit.table_cell(self.render_vec(children))
            case FootnoteDefinition(reference=reference, children=children):
                return emit.footnote_definition(reference, self.render_vec(children))
            case Annotation(data=data, children=children):
                return emit.annotation(data, self.render_vec(children))
            case _:
                raise TypeError(f"Token inconnu : {token!r}")

    def _render_title(self, children: tuple[Token, ...]) -> str:
        """
        Rend un titre de niveau 1.

        - chapitre masqué : rien n'est émis, le compteur ne bouge pas
        - numérotation active : numéro lu puis incrémenté, titre passé au
          template de chapitre (ou de partie)
        - sinon : contenu brut du titre
        """
        state = self.state
        if state.current_hide:
            return ""

        if state.numbering_enabled:
            number = state.next_chapter_number()
            if state.current_part:
                rendered = self.book.get_part_header(number, self.render_vec(children))
            else:
                rendered = self.book.get_chapter_header(number, self.render_vec(children))
        else:
            rendered = self.render_vec(children)

        if self._title is None:
            self._title = rendered
        else:
            logger.warning(
                "Deux titres de niveau 1 dans le même chapitre, "
                f"conflit entre '{self._title}' et '{rendered}' (le premier est conservé)"
            )
        return self.emitter.header(1, rendered)
