"""
Directive de numérotation attachée à chaque chapitre.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NumberKind(Enum):
    UNNUMBERED = "unnumbered"
    UNNUMBERED_PART = "unnumbered_part"
    DEFAULT = "default"
    DEFAULT_PART = "default_part"
    SPECIFIED = "specified"
    SPECIFIED_PART = "specified_part"
    HIDDEN = "hidden"


_PART_TO_CHAPTER = {
    NumberKind.UNNUMBERED_PART: NumberKind.UNNUMBERED,
    NumberKind.DEFAULT_PART: NumberKind.DEFAULT,
    NumberKind.SPECIFIED_PART: NumberKind.SPECIFIED,
}


@dataclass(frozen=True)
class Number:
    """
    Indique comment un chapitre influe sur la numérotation.

    - Unnumbered : pas de numéro pour ce chapitre (le compteur n'est pas remis à zéro)
    - Default : numérotation globale du livre
    - Specified(n) : numérotation globale, compteur forcé à n
    - Hidden : ni numéro ni entrée dans la table des matières
    - variantes *Part : même chose, mais le chapitre est une partie (regroupement)

    Example:
        >>> Number.specified(5).value
        5
        >>> Number.default_part().is_part()
        True
    """

    kind: NumberKind
    value: Optional[int] = None

    def __post_init__(self):
        needs_value = self.kind in (NumberKind.SPECIFIED, NumberKind.SPECIFIED_PART)
        if needs_value and self.value is None:
            raise ValueError(f"{self.kind.value} requiert un numéro")
        if not needs_value and self.value is not None:
            raise ValueError(f"{self.kind.value} n'accepte pas de numéro")

    @classmethod
    def unnumbered(cls) -> "Number":
        return cls(NumberKind.UNNUMBERED)

    @classmethod
    def unnumbered_part(cls) -> "Number":
        return cls(NumberKind.UNNUMBERED_PART)

    @classmethod
    def default(cls) -> "Number":
        return cls(NumberKind.DEFAULT)

    @classmethod
    def default_part(cls) -> "Number":
        return cls(NumberKind.DEFAULT_PART)

    @classmethod
    def specified(cls, n: int) -> "Number":
        return cls(NumberKind.SPECIFIED, n)

    @classmethod
    def specified_part(cls, n: int) -> "Number":
        return cls(NumberKind.SPECIFIED_PART, n)

    @classmethod
    def hidden(cls) -> "Number":
        return cls(NumberKind.HIDDEN)

    def is_part(self) -> bool:
        return self.kind in _PART_TO_CHAPTER

    def is_hidden(self) -> bool:
        return self.kind is NumberKind.HIDDEN

    def to_non_part(self) -> "Number":
        """Retourne la variante « chapitre » d'une directive de partie."""
        return Number(_PART_TO_CHAPTER.get(self.kind, self.kind), self.value)

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.kind.value}({self.value})"
        return self.kind.value
