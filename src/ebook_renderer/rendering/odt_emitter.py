"""
Émetteur OpenDocument Text (contenu de content.xml).

Le rendu ODT reste volontairement partiel : images, tableaux et notes de bas
de page sont ignorés, les citations et blocs de code deviennent de simples
paragraphes. L'utilisateur en est prévenu par OdtRenderer avant le rendu.
"""

from markupsafe import escape

from ..logger import get_logger
from .emitter import LeafEmitter

logger = get_logger(__name__)

# Styles automatiques référencés par emphasis() et strong()
AUTOMATIC_STYLES = """
<style:style style:name="T1" style:family="text">
  <style:text-properties fo:font-style="italic" style:font-style-asian="italic" style:font-style-complex="italic"/>
</style:style>
<style:style style:name="T2" style:family="text">
  <style:text-properties fo:font-weight="bold" style:font-weight-asian="bold" style:font-weight-complex="bold"/>
</style:style>"""


class OdtEmitter(LeafEmitter):
    """
    Produit le balisage text:* d'OpenDocument.

    Attributes:
        unhandled: Types de tokens déjà signalés comme non gérés (un
            avertissement par type et par passe de rendu)
    """

    def __init__(self):
        self.unhandled: set[str] = set()

    def _warn_unhandled(self, kind: str) -> None:
        if kind not in self.unhandled:
            self.unhandled.add(kind)
            logger.warning(f"ODT : {kind} non géré dans ce format, seul le contenu est conservé")

    def text(self, text: str) -> str:
        return str(escape(text))

    def paragraph(self, inner: str) -> str:
        return f'<text:p text:style-name="Text_20_body">{inner}</text:p>\n'

    def header(self, level: int, inner: str) -> str:
        return f'<text:h text:style-name="Heading_20_{level}">\n{inner}</text:h>\n'

    def emphasis(self, inner: str) -> str:
        return f'<text:span text:style-name="T1">{inner}</text:span>'

    def strong(self, inner: str) -> str:
        return f'<text:span text:style-name="T2">{inner}</text:span>'

    def strikethrough(self, inner: str) -> str:
        self._warn_unhandled("texte barré")
        return inner

    def unordered_list(self, inner: str) -> str:
        return f"<text:list>\n{inner}</text:list>\n"

    def ordered_list(self, start: int, inner: str) -> str:
        return f"<text:list>\n{inner}</text:list>\n"

    def item(self, inner: str) -> str:
        return f"<text:list-item>\n<text:p>{inner}</text:p></text:list-item>"

    def task_item(self, checked: bool, inner: str) -> str:
        self._warn_unhandled("case à cocher")
        return inner

    def description_list(self, inner: str) -> str:
        self._warn_unhandled("liste de définitions")
        return inner

    def description_item(self, inner: str) -> str:
        self._warn_unhandled("liste de définitions")
        return inner

    def description_term(self, inner: str) -> str:
        self._warn_unhandled("liste de définitions")
        return inner

    def description_details(self, inner: str) -> str:
        self._warn_unhandled("liste de définitions")
        return inner

    def link(self, url: str, title: str, inner: str) -> str:
        return f'<text:a xlink:type="simple" xlink:href="{escape(url)}">{inner}</text:a>'

    def code(self, text: str) -> str:
        return f'<text:span text:style-name="Preformatted_20_Text">{escape(text)}</text:span>'

    def code_block(self, language: str, text: str) -> str:
        return f'<text:p text:style-name="Text_20_body">{escape(text)}</text:p>\n'

    def block_quote(self, inner: str) -> str:
        return f'<text:p text:style-name="Text_20_body">{inner}</text:p>\n'

    def soft_break(self) -> str:
        return " "

    def hard_break(self) -> str:
        return " "

    def rule(self) -> str:
        return "<text:p /><text:p>***</text:p><text:p />"

    def image(self, url: str, title: str, alt: str, standalone: bool) -> str:
        return " "

    def subscript(self, inner: str) -> str:
        return inner

    def superscript(self, inner: str) -> str:
        return inner

    def table(self, columns: int, inner: str) -> str:
        return " "

    def table_head(self, inner: str) -> str:
        return " "

    def table_row(self, inner: str) -> str:
        return " "

    def table_cell(self, inner: str) -> str:
        return " "

    def footnote_reference(self, reference: str) -> str:
        return ""

    def footnote_definition(self, reference: str, inner: str) -> str:
        return ""

    def annotation(self, data: str, inner: str) -> str:
        return inner
