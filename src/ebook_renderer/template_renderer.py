"""
Moteur de templates Jinja2 utilisé par les renderers EPUB et ODT.

Ce module encapsule la compilation et le rendu des templates, ainsi que
l'accès aux templates intégrés au paquet (répertoire templates/).

Le rendu produit des octets UTF-8 : c'est ce qui est écrit dans l'archive.
Une sortie impossible à encoder (ex: surrogate isolé dans une métadonnée)
est signalée par TemplateEncodingError.
"""

from importlib import resources

import jinja2
from jinja2 import Environment, PackageLoader, select_autoescape

from .exceptions import TemplateEncodingError, TemplateError

PACKAGE_NAME = "ebook_renderer"
TEMPLATE_DIR = "templates"


class TemplateRenderer:
    """
    Encapsule l'environnement Jinja2 et le rendu des templates.

    L'échappement automatique est actif pour les sources XML/XHTML et pour
    les templates compilés depuis une chaîne : les fragments déjà rendus
    doivent donc être passés sous forme de ``markupsafe.Markup``.

    Example:
        >>> renderer = TemplateRenderer()
        >>> source = renderer.get_source("epub2/nav.xhtml")
        >>> data = renderer.render(source, "epub2/nav.xhtml", title="Mon livre")
    """

    def __init__(self, package: str = PACKAGE_NAME, template_dir: str = TEMPLATE_DIR):
        self.package = package
        self.template_dir = template_dir
        self.env = Environment(
            loader=PackageLoader(package, template_dir),
            autoescape=select_autoescape(
                enabled_extensions=("xhtml", "xml", "opf", "ncx", "html"),
                default_for_string=True,
            ),
            keep_trailing_newline=True,
        )

    def get_source(self, name: str) -> str:
        """
        Retourne la source d'un template intégré.

        Raises:
            TemplateError: Si le template n'existe pas
        """
        assert self.env.loader is not None
        try:
            source, _, _ = self.env.loader.get_source(self.env, name)
        except jinja2.TemplateNotFound as err:
            raise TemplateError(name, "template intégré introuvable") from err
        return source

    def get_binary(self, name: str) -> bytes:
        """Retourne le contenu brut d'une ressource intégrée (ex: archive ODT de base)."""
        resource = resources.files(self.package).joinpath(self.template_dir, name)
        try:
            return resource.read_bytes()
        except OSError as err:
            raise TemplateError(name, f"ressource illisible ({err})") from err

    def render(self, source: str, name: str, **params) -> bytes:
        """
        Compile une source de template et la rend avec les variables données.

        Args:
            source: Source du template (syntaxe Jinja2)
            name: Identifiant du template, utilisé dans les messages d'erreur
            **params: Variables à passer au template

        Returns:
            Sortie du template encodée en UTF-8

        Raises:
            TemplateError: Si la compilation ou le rendu échoue
            TemplateEncodingError: Si la sortie n'est pas encodable en UTF-8
        """
        try:
            text = self.env.from_string(source).render(**params)
        except jinja2.TemplateSyntaxError as err:
            raise TemplateError(name, f"ligne {err.lineno}: {err.message}") from err
        except jinja2.TemplateError as err:
            raise TemplateError(name, str(err)) from err

        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as err:
            raise TemplateEncodingError(name) from err

    def render_text(self, source: str, name: str, **params) -> str:
        """Comme render(), mais retourne du texte (utilisé pour les titres)."""
        return self.render(source, name, **params).decode("utf-8")
