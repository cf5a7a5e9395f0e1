"""
Exceptions spécifiques au rendu des livres.

Toutes les erreurs fatales d'une passe de rendu héritent de RenderError :
l'appelant n'a qu'un seul type à intercepter, et aucune archive partielle
ne doit être considérée comme utilisable après une telle erreur.

Les situations non fatales (fonctionnalité non supportée, titre en double,
extension de couverture inconnue...) ne lèvent pas d'exception : elles sont
journalisées via le logger du module concerné.
"""

from pathlib import Path


class RenderError(Exception):
    """Erreur fatale interrompant une passe de rendu."""


class ConfigurationError(RenderError):
    """
    Exception levée quand la configuration ne permet pas de générer l'archive.

    Typiquement : aucun chemin de sortie n'est configuré pour le format demandé.
    Levée avant toute écriture de fichier.
    """


class ContentError(RenderError):
    """
    Exception levée quand le contenu d'un chapitre est invalide pour le format.

    Attributes:
        chapter_index: Index (0-based) du chapitre fautif
    """

    def __init__(self, message: str, chapter_index: int):
        self.chapter_index = chapter_index
        super().__init__(f"Chapitre {chapter_index}: {message}")


class CoverFileError(RenderError):
    """
    Exception levée quand le fichier de couverture est absent ou illisible.

    L'OSError d'origine est chaînée (``raise ... from err``).

    Attributes:
        path: Chemin de la couverture tel que configuré
    """

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        super().__init__(f"Couverture illisible '{self.path}': {reason}")


class TemplateError(RenderError):
    """
    Exception levée quand un template ne peut pas être compilé ou rendu.

    Attributes:
        template_name: Identifiant du template en cause
    """

    def __init__(self, template_name: str, reason: str):
        self.template_name = template_name
        super().__init__(f"Template '{template_name}': {reason}")


class TemplateEncodingError(TemplateError):
    """
    Exception levée quand la sortie d'un template n'est pas du texte UTF-8 valide.

    Correspond à une violation d'invariant interne : le moteur de templates
    est censé toujours produire du texte encodable.
    """

    def __init__(self, template_name: str):
        super().__init__(template_name, "la sortie générée n'est pas de l'UTF-8 valide")

    def __repr__(self) -> str:
        return f"TemplateEncodingError(template_name={self.template_name!r})"


class PackagingError(RenderError):
    """Exception levée lors de la préparation ou de la compression de l'archive."""
