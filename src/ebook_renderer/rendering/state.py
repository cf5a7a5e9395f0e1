"""
État d'une passe de rendu et machine à états de la numérotation.

Un RendererState est créé pour chaque appel à render_book() et jeté ensuite :
il n'est jamais partagé entre deux livres ni entre deux formats.
"""

from dataclasses import dataclass, field

from ..book.number import Number, NumberKind
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass
class RendererState:
    """
    État mutable threadé à travers le parcours des tokens.

    Attributes:
        default_numbering: Numérotation restaurée par Default / DefaultPart
        specified_numbering: Numérotation restaurée par Specified(n) / SpecifiedPart(n)
        supports_parts: Le format sait-il rendre les parties ?
        format_name: Nom du format, pour les diagnostics
        current_numbering: Profondeur de numérotation du chapitre courant
            (0 = désactivée ; l'EPUB n'utilise que 0 et 1)
        current_chapter: Prochain numéro de chapitre
        current_hide: True si le chapitre courant est Hidden
        current_part: True si le chapitre courant est une partie
        toc: Titres des chapitres rendus, un par chapitre, dans l'ordre
    """

    default_numbering: int
    specified_numbering: int
    supports_parts: bool = True
    format_name: str = ""
    current_numbering: int = field(init=False)
    current_chapter: int = 1
    current_hide: bool = False
    current_part: bool = False
    toc: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.current_numbering = self.default_numbering

    @property
    def numbering_enabled(self) -> bool:
        return self.current_numbering >= 1

    def enter_chapter(self, number: Number) -> None:
        """
        Applique la directive d'un chapitre, avant le parcours de ses tokens.

        - Unnumbered : numérotation coupée pour ce chapitre seulement
        - Default : numérotation globale restaurée
        - Specified(n) : numérotation restaurée et compteur forcé à n
        - Hidden : numérotation coupée, titre masqué

        Les variantes *Part suivent les mêmes règles : une partie consomme
        le même compteur que les chapitres, seul le template du titre change.

        Un format sans parties journalise un avertissement et traite la
        directive comme sa variante « chapitre ».
        """
        self.current_hide = False
        self.current_part = False

        if number.is_part():
            if self.supports_parts:
                self.current_part = True
            else:
                logger.warning(
                    f"Les parties ne sont pas encore supportées en {self.format_name} : "
                    f"directive '{number}' traitée comme '{number.to_non_part()}'"
                )
                number = number.to_non_part()

        match number.kind:
            case NumberKind.UNNUMBERED | NumberKind.UNNUMBERED_PART:
                self.current_numbering = 0
            case NumberKind.DEFAULT | NumberKind.DEFAULT_PART:
                self.current_numbering = self.default_numbering
            case NumberKind.SPECIFIED | NumberKind.SPECIFIED_PART:
                assert number.value is not None
                self.current_numbering = self.specified_numbering
                self.current_chapter = number.value
            case NumberKind.HIDDEN:
                self.current_numbering = 0
                self.current_hide = True

    def next_chapter_number(self) -> int:
        """Lit le compteur de chapitres puis l'incrémente."""
        number = self.current_chapter
        self.current_chapter += 1
        return number
