"""
Livre à rendre : chapitres, métadonnées et options de rendu.

Le Book est un collaborateur en lecture seule pour les renderers. Il fournit :
- les chapitres dans l'ordre (directive Number + arbre de tokens)
- les options résolues (numérotation, version EPUB, chemins de sortie...)
- l'accès aux templates (intégrés ou surchargés par fichier)
- les variables de template pré-remplies avec les métadonnées
- le rendu des titres numérotés de chapitres et de parties
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Iterable, Optional

from markupsafe import Markup

from ..config import EnvKeys, EpubVersion, read_environment
from ..exceptions import TemplateError
from ..template_renderer import TemplateRenderer
from .number import Number
from .tokens import Features, Token, collect_features


@dataclass(frozen=True)
class Chapter:
    number: Number
    content: tuple[Token, ...]


@dataclass
class BookOptions:
    """
    Options de rendu, déjà résolues (pas d'analyse de ligne de commande ici).

    Attributes:
        numbering: Profondeur de numérotation globale (0 = désactivée).
            Utilisée par l'EPUB, et par l'ODT pour les chapitres Specified(n)
        num_depth: Profondeur de rendu de la numérotation, utilisée par l'ODT
            pour les chapitres Default
        epub_version: Schéma EPUB cible (2 ou 3)
        output_epub: Chemin de l'EPUB généré
        output_odt: Chemin de l'ODT généré
        temp_dir: Répertoire parent des répertoires de travail temporaires
        chapter_template: Template Jinja2 des titres de chapitre numérotés
            (variables : number, title)
        part_template: Template Jinja2 des titres de partie numérotés
        roman_numerals_chapters: Numéros de chapitre en chiffres romains
        roman_numerals_parts: Numéros de partie en chiffres romains
        template_overrides: {identifiant_template: chemin} pour remplacer
            un template intégré
        show_progress: Affiche une barre de progression pendant le rendu
    """

    numbering: int = 1
    num_depth: int = 1
    epub_version: EpubVersion = EpubVersion.V2
    output_epub: Optional[Path] = None
    output_odt: Optional[Path] = None
    temp_dir: Optional[Path] = None
    chapter_template: str = "{{ number }}. {{ title }}"
    part_template: str = "Part {{ number }}: {{ title }}"
    roman_numerals_chapters: bool = False
    roman_numerals_parts: bool = True
    template_overrides: dict[str, Path] = field(default_factory=dict)
    show_progress: bool = False

    def __post_init__(self):
        self.epub_version = EpubVersion.parse(self.epub_version)
        for name in ("output_epub", "output_odt", "temp_dir"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                setattr(self, name, Path(value))

    @classmethod
    def from_env(cls, **overrides) -> "BookOptions":
        """
        Construit les options à partir de l'environnement (et d'un éventuel .env).

        Les arguments nommés ont priorité sur l'environnement.

        Example:
            >>> # .env : EBOOK_RENDERER_OUTPUT_EPUB=out/book.epub
            >>> options = BookOptions.from_env(numbering=0)
        """
        env = read_environment()
        values: dict[str, object] = {}
        if EnvKeys.Temp_Dir in env:
            values["temp_dir"] = env[EnvKeys.Temp_Dir]
        if EnvKeys.Output_Epub in env:
            values["output_epub"] = env[EnvKeys.Output_Epub]
        if EnvKeys.Output_Odt in env:
            values["output_odt"] = env[EnvKeys.Output_Odt]
        if EnvKeys.Epub_Version in env:
            values["epub_version"] = env[EnvKeys.Epub_Version]

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Options inconnues : {', '.join(sorted(unknown))}")
        values.update(overrides)
        return cls(**values)


_ROMAN_NUMERALS = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)


def to_roman(n: int) -> str:
    """
    Convertit un entier positif en chiffres romains.

    Les valeurs <= 0 n'ont pas de représentation : elles sont rendues en
    chiffres arabes.

    Example:
        >>> to_roman(14)
        'XIV'
    """
    if n <= 0:
        return str(n)
    result = []
    for value, symbol in _ROMAN_NUMERALS:
        count, n = divmod(n, value)
        result.append(symbol * count)
    return "".join(result)


class Book:
    """
    Livre prêt à être rendu.

    Attributes:
        chapters: Chapitres dans l'ordre de lecture
        options: Options de rendu
        root: Répertoire de référence pour les chemins relatifs (couverture,
            surcharges de templates)
        cover: Chemin relatif de l'image de couverture (optionnel)
    """

    def __init__(
        self,
        chapters: Iterable[Chapter] = (),
        *,
        title: str = "",
        author: str = "",
        lang: str = "en",
        description: Optional[str] = None,
        subject: Optional[str] = None,
        cover: Optional[str] = None,
        root: str | Path = ".",
        options: Optional[BookOptions] = None,
        templates: Optional[TemplateRenderer] = None,
    ):
        self.chapters: list[Chapter] = list(chapters)
        self.title = title
        self.author = author
        self.lang = lang
        self.description = description
        self.subject = subject
        self.cover = cover
        self.root = Path(root)
        self.options = options or BookOptions()
        self.templates = templates or TemplateRenderer()

    def add_chapter(self, number: Number, content: Iterable[Token]) -> Chapter:
        """Ajoute un chapitre à la fin du livre et le retourne."""
        chapter = Chapter(number, tuple(content))
        self.chapters.append(chapter)
        return chapter

    @property
    def features(self) -> Features:
        return collect_features(self.chapters)

    # -----------------------------------
    # 🔹 Templates
    # -----------------------------------
    def get_template(self, key: str) -> str:
        """
        Retourne la source du template identifié par key.

        Une surcharge déclarée dans options.template_overrides (chemin relatif
        à root) a priorité sur le template intégré.

        Raises:
            TemplateError: Si le template est introuvable ou illisible
        """
        override = self.options.template_overrides.get(key)
        if override is None:
            return self.templates.get_source(key)

        path = self.root / override
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise TemplateError(key, f"surcharge illisible '{path}' ({err})") from err

    def get_metadata(self) -> dict[str, object]:
        """
        Variables de template communes à tous les fichiers générés.

        Les valeurs textuelles sont échappées par le moteur de templates.
        """
        return {
            "title": self.title,
            "author": self.author,
            "lang": self.lang,
            "description": self.description,
            "subject": self.subject,
            "cover": self.cover,
        }

    # -----------------------------------
    # 🔹 Titres numérotés
    # -----------------------------------
    def get_chapter_header(self, number: int, rendered_title: str) -> str:
        """
        Rend le titre numéroté d'un chapitre.

        Args:
            number: Numéro du chapitre
            rendered_title: Titre déjà rendu dans le format cible (balisage)

        Returns:
            Balisage du titre complet (ex: "3. Le départ")
        """
        shown = to_roman(number) if self.options.roman_numerals_chapters else number
        return self.templates.render_text(
            self.options.chapter_template,
            "chapter_template",
            number=shown,
            title=Markup(rendered_title),
        )

    def get_part_header(self, number: int, rendered_title: str) -> str:
        """Rend le titre numéroté d'une partie (cf. get_chapter_header)."""
        shown = to_roman(number) if self.options.roman_numerals_parts else number
        return self.templates.render_text(
            self.options.part_template,
            "part_template",
            number=shown,
            title=Markup(rendered_title),
        )
