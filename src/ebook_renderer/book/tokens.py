"""
Représentation de l'arbre de tokens produit par le parser de texte balisé.

Chaque type de nœud est une dataclass gelée : l'arbre est en lecture seule
pendant tout le rendu, aucun renderer ne modifie les tokens qu'il parcourt.
Les enfants sont stockés dans des tuples.
"""

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Iterable, Iterator, Union

if TYPE_CHECKING:
    from .book import Chapter


Children = tuple["Token", ...]


# =============================================================================
# Feuilles
# =============================================================================


@dataclass(frozen=True)
class Str:
    """Texte brut (non échappé)."""

    text: str


@dataclass(frozen=True)
class Code:
    """Code en ligne (texte littéral)."""

    text: str


@dataclass(frozen=True)
class CodeBlock:
    language: str
    text: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class FootnoteReference:
    reference: str


# =============================================================================
# Conteneurs
# =============================================================================


@dataclass(frozen=True)
class Paragraph:
    children: Children = ()


@dataclass(frozen=True)
class Header:
    """Titre de niveau 1 à 6."""

    level: int
    children: Children = ()

    def __post_init__(self):
        if not 1 <= self.level <= 6:
            raise ValueError(f"Niveau de titre invalide : {self.level}")


@dataclass(frozen=True)
class Emphasis:
    children: Children = ()


@dataclass(frozen=True)
class Strong:
    children: Children = ()


@dataclass(frozen=True)
class Strikethrough:
    children: Children = ()


@dataclass(frozen=True)
class List:
    """Liste non ordonnée."""

    children: Children = ()


@dataclass(frozen=True)
class OrderedList:
    start: int = 1
    children: Children = ()


@dataclass(frozen=True)
class Item:
    children: Children = ()


@dataclass(frozen=True)
class DescriptionList:
    children: Children = ()


@dataclass(frozen=True)
class DescriptionItem:
    children: Children = ()


@dataclass(frozen=True)
class DescriptionTerm:
    children: Children = ()


@dataclass(frozen=True)
class DescriptionDetails:
    children: Children = ()


@dataclass(frozen=True)
class Link:
    url: str
    title: str = ""
    children: Children = ()


@dataclass(frozen=True)
class BlockQuote:
    children: Children = ()


@dataclass(frozen=True)
class Image:
    """Image en ligne ; les enfants forment le texte alternatif."""

    url: str
    title: str = ""
    children: Children = ()


@dataclass(frozen=True)
class StandaloneImage:
    """Image seule dans son paragraphe."""

    url: str
    title: str = ""
    children: Children = ()


@dataclass(frozen=True)
class Subscript:
    children: Children = ()


@dataclass(frozen=True)
class Superscript:
    children: Children = ()


@dataclass(frozen=True)
class Table:
    columns: int
    children: Children = ()


@dataclass(frozen=True)
class TableHead:
    children: Children = ()


@dataclass(frozen=True)
class TableRow:
    children: Children = ()


@dataclass(frozen=True)
class TableCell:
    children: Children = ()


@dataclass(frozen=True)
class FootnoteDefinition:
    reference: str
    children: Children = ()


@dataclass(frozen=True)
class TaskItem:
    checked: bool
    children: Children = ()


@dataclass(frozen=True)
class Annotation:
    """Annotation libre : seuls les enfants sont rendus."""

    data: str
    children: Children = ()


Token = Union[
    Str,
    Code,
    CodeBlock,
    SoftBreak,
    HardBreak,
    Rule,
    FootnoteReference,
    Paragraph,
    Header,
    Emphasis,
    Strong,
    Strikethrough,
    List,
    OrderedList,
    Item,
    DescriptionList,
    DescriptionItem,
    DescriptionTerm,
    DescriptionDetails,
    Link,
    BlockQuote,
    Image,
    StandaloneImage,
    Subscript,
    Superscript,
    Table,
    TableHead,
    TableRow,
    TableCell,
    FootnoteDefinition,
    TaskItem,
    Annotation,
]


def children_of(token: Token) -> Children:
    """Retourne les enfants d'un token (tuple vide pour une feuille)."""
    return getattr(token, "children", ())


def walk(tokens: Iterable[Token]) -> Iterator[Token]:
    """Parcours en profondeur (préfixe) de tous les tokens d'une séquence."""
    for token in tokens:
        yield token
        yield from walk(children_of(token))


# =============================================================================
# Fonctionnalités utilisées par un document
# =============================================================================


@dataclass
class Features:
    """
    Fonctionnalités présentes dans les chapitres d'un livre.

    Sert à prévenir l'utilisateur quand un format de sortie (ODT) ne sait
    pas les rendre nativement.
    """

    image: bool = False
    blockquote: bool = False
    codeblock: bool = False
    ordered_list: bool = False
    footnote: bool = False
    table: bool = False
    superscript: bool = False
    subscript: bool = False

    def used(self) -> list[str]:
        """Noms des fonctionnalités présentes, dans l'ordre de déclaration."""
        return [f.name for f in fields(self) if getattr(self, f.name)]


def collect_features(chapters: Iterable["Chapter"]) -> Features:
    """
    Détecte les fonctionnalités utilisées par l'ensemble des chapitres.

    Args:
        chapters: Chapitres du livre

    Returns:
        Features avec un drapeau à True pour chaque fonctionnalité rencontrée
    """
    features = Features()
    for chapter in chapters:
        for token in walk(chapter.content):
            match token:
                case Image() | StandaloneImage():
                    features.image = True
                case BlockQuote():
                    features.blockquote = True
                case CodeBlock():
                    features.codeblock = True
                case OrderedList():
                    features.ordered_list = True
                case FootnoteReference() | FootnoteDefinition():
                    features.footnote = True
                case Table() | TableHead() | TableRow() | TableCell():
                    features.table = True
                case Superscript():
                    features.superscript = True
                case Subscript():
                    features.subscript = True
    return features
