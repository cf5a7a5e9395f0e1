import logging
import os
from enum import Enum
from typing import NamedTuple

from dotenv import load_dotenv


class ConfigBase:
    # Attribut de classe pour le singleton
    _instance = None
    _locked: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def lock(self):
        self._locked = True

    def __setattr__(self, name, value):
        if getattr(self, "_locked", False):
            raise AttributeError("Configuration is locked")
        super().__setattr__(name, value)


class TemplateNames(ConfigBase):
    """Identifiants des templates intégrés (chemins relatifs à templates/)."""

    Epub_Css: str = "epub/stylesheet.css"
    Epub_Chapter: str = "epub/chapter.xhtml"
    Epub_Container: str = "epub/container.xml"
    Epub_Ibooks: str = "epub/ibooks.xml"
    Epub_Toc: str = "epub/toc.ncx"
    Odt_Content: str = "odt/content.xml"
    Odt_Base_Archive: str = "odt/template.odt"


class EpubTemplates(NamedTuple):
    title_page: str
    opf: str
    nav: str
    cover: str


class EpubVersion(Enum):
    """
    Versions du schéma EPUB supportées.

    Chaque version correspond à son propre jeu de templates ; ajouter une
    version revient à ajouter un membre et son répertoire de templates.
    """

    V2 = 2
    V3 = 3

    @property
    def templates(self) -> EpubTemplates:
        folder = f"epub{self.value}"
        return EpubTemplates(
            title_page=f"{folder}/title_page.xhtml",
            opf=f"{folder}/content.opf",
            nav=f"{folder}/nav.xhtml",
            cover=f"{folder}/cover.xhtml",
        )

    @classmethod
    def parse(cls, value: "EpubVersion | int | str") -> "EpubVersion":
        """Convertit 2, "3", EpubVersion.V3... en EpubVersion."""
        if isinstance(value, EpubVersion):
            return value
        try:
            return cls(int(value))
        except ValueError:
            raise ValueError(
                f"Version EPUB non supportée : {value!r} (attendu : 2 ou 3)"
            ) from None


class Logger_Level(ConfigBase):
    level: int = logging.INFO
    console_level: int = logging.WARNING
    file_level: int = logging.DEBUG


class EnvKeys(ConfigBase):
    """Variables d'environnement (ou .env) lues par BookOptions.from_env()."""

    Temp_Dir: str = "EBOOK_RENDERER_TEMP_DIR"
    Output_Epub: str = "EBOOK_RENDERER_OUTPUT_EPUB"
    Output_Odt: str = "EBOOK_RENDERER_OUTPUT_ODT"
    Epub_Version: str = "EBOOK_RENDERER_EPUB_VERSION"
    Log_Dir: str = "EBOOK_RENDERER_LOG_DIR"


def read_environment() -> dict[str, str]:
    """
    Charge le fichier .env puis retourne les variables connues qui sont définies.

    Returns:
        Dictionnaire {nom_variable: valeur} limité aux clés de EnvKeys
    """
    load_dotenv()
    keys = (
        EnvKeys.Temp_Dir,
        EnvKeys.Output_Epub,
        EnvKeys.Output_Odt,
        EnvKeys.Epub_Version,
        EnvKeys.Log_Dir,
    )
    return {key: os.environ[key] for key in keys if os.environ.get(key)}


def lock_config():
    """Verrouille la configuration pour empêcher les modifications ultérieures."""
    Logger_Level().lock()
    TemplateNames().lock()
    EnvKeys().lock()
