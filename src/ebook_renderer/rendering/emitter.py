"""
Interface des émetteurs de feuilles, implémentée une fois par format de sortie.

Le parcours de l'arbre (TreeWalker) est commun à tous les formats : il rend
les enfants de chaque token puis délègue à l'émetteur la production du
balisage propre au format. L'émetteur ne voit jamais l'état de numérotation.
"""

from typing import Protocol


class LeafEmitter(Protocol):
    """
    Interface (Protocol) des émetteurs de balisage.

    Chaque méthode reçoit le contenu déjà rendu des enfants (``inner``) et
    retourne le balisage du token. Les textes bruts (``text``, ``code``...)
    ne sont pas échappés : c'est le rôle de l'émetteur.

    Un format qui ne sait pas rendre un token doit au minimum retourner
    ``inner`` (on garde le contenu, on perd l'enveloppe) ou une chaîne
    de remplacement.
    """

    def text(self, text: str) -> str: ...

    def paragraph(self, inner: str) -> str: ...

    def header(self, level: int, inner: str) -> str: ...

    def emphasis(self, inner: str) -> str: ...

    def strong(self, inner: str) -> str: ...

    def strikethrough(self, inner: str) -> str: ...

    def unordered_list(self, inner: str) -> str: ...

    def ordered_list(self, start: int, inner: str) -> str: ...

    def item(self, inner: str) -> str: ...

    def task_item(self, checked: bool, inner: str) -> str: ...

    def description_list(self, inner: str) -> str: ...

    def description_item(self, inner: str) -> str: ...

    def description_term(self, inner: str) -> str: ...

    def description_details(self, inner: str) -> str: ...

    def link(self, url: str, title: str, inner: str) -> str: ...

    def code(self, text: str) -> str: ...

    def code_block(self, language: str, text: str) -> str: ...

    def block_quote(self, inner: str) -> str: ...

    def soft_break(self) -> str: ...

    def hard_break(self) -> str: ...

    def rule(self) -> str: ...

    def image(self, url: str, title: str, alt: str, standalone: bool) -> str: ...

    def subscript(self, inner: str) -> str: ...

    def superscript(self, inner: str) -> str: ...

    def table(self, columns: int, inner: str) -> str: ...

    def table_head(self, inner: str) -> str: ...

    def table_row(self, inner: str) -> str: ...

    def table_cell(self, inner: str) -> str: ...

    def footnote_reference(self, reference: str) -> str: ...

    def footnote_definition(self, reference: str, inner: str) -> str: ...

    def annotation(self, data: str, inner: str) -> str: ...
