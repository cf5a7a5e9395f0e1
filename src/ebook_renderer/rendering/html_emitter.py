"""
Émetteur XHTML utilisé pour les chapitres EPUB.
"""

from markupsafe import Markup, escape

from .emitter import LeafEmitter


def _attr(value: str) -> str:
    return str(escape(value))


class HtmlEmitter(LeafEmitter):
    """
    Produit du XHTML valide dans un document EPUB (balises fermées, <br />...).

    Les notes de bas de page sont rendues sur place : l'appel est un lien
    vers la définition, la définition est un bloc portant l'ancre.
    """

    def text(self, text: str) -> str:
        return str(escape(text))

    def paragraph(self, inner: str) -> str:
        return f"<p>{inner}</p>\n"

    def header(self, level: int, inner: str) -> str:
        return f"<h{level}>{inner}</h{level}>\n"

    def emphasis(self, inner: str) -> str:
        return f"<em>{inner}</em>"

    def strong(self, inner: str) -> str:
        return f"<strong>{inner}</strong>"

    def strikethrough(self, inner: str) -> str:
        return f"<del>{inner}</del>"

    def unordered_list(self, inner: str) -> str:
        return f"<ul>\n{inner}</ul>\n"

    def ordered_list(self, start: int, inner: str) -> str:
        return f'<ol start="{start}">\n{inner}</ol>\n'

    def item(self, inner: str) -> str:
        return f"<li>{inner}</li>\n"

    def task_item(self, checked: bool, inner: str) -> str:
        box = "☑" if checked else "☐"
        return f'<li class="task">{box} {inner}</li>\n'

    def description_list(self, inner: str) -> str:
        return f"<dl>\n{inner}</dl>\n"

    def description_item(self, inner: str) -> str:
        return inner

    def description_term(self, inner: str) -> str:
        return f"<dt>{inner}</dt>\n"

    def description_details(self, inner: str) -> str:
        return f"<dd>{inner}</dd>\n"

    def link(self, url: str, title: str, inner: str) -> str:
        title_attr = f' title="{_attr(title)}"' if title else ""
        return f'<a href="{_attr(url)}"{title_attr}>{inner}</a>'

    def code(self, text: str) -> str:
        return f"<code>{escape(text)}</code>"

    def code_block(self, language: str, text: str) -> str:
        class_attr = f' class="language-{_attr(language)}"' if language else ""
        return f"<pre><code{class_attr}>{escape(text)}</code></pre>\n"

    def block_quote(self, inner: str) -> str:
        return f"<blockquote>\n{inner}</blockquote>\n"

    def soft_break(self) -> str:
        return " "

    def hard_break(self) -> str:
        return "<br />\n"

    def rule(self) -> str:
        return "<hr />\n"

    def image(self, url: str, title: str, alt: str, standalone: bool) -> str:
        title_attr = f' title="{_attr(title)}"' if title else ""
        # alt est déjà rendu : on retire le balisage éventuel avant de le mettre en attribut
        img = f'<img src="{_attr(url)}" alt="{_attr(Markup(alt).striptags())}"{title_attr} />'
        if standalone:
            return f'<div class="image">\n  {img}\n</div>\n'
        return img

    def subscript(self, inner: str) -> str:
        return f"<sub>{inner}</sub>"

    def superscript(self, inner: str) -> str:
        return f"<sup>{inner}</sup>"

    def table(self, columns: int, inner: str) -> str:
        return f"<table>\n{inner}</table>\n"

    def table_head(self, inner: str) -> str:
        return f"<thead><tr>\n{inner}</tr></thead>\n"

    def table_row(self, inner: str) -> str:
        return f"<tr>\n{inner}</tr>\n"

    def table_cell(self, inner: str) -> str:
        return f"<td>{inner}</td>\n"

    def footnote_reference(self, reference: str) -> str:
        ref = _attr(reference)
        return f'<a href="#note-dest-{ref}" id="note-source-{ref}"><sup>{ref}</sup></a>'

    def footnote_definition(self, reference: str, inner: str) -> str:
        ref = _attr(reference)
        return (
            f'<div class="footnote" id="note-dest-{ref}">\n'
            f'<p class="note-number"><a href="#note-source-{ref}">{ref}</a></p>\n'
            f"{inner}</div>\n"
        )

    def annotation(self, data: str, inner: str) -> str:
        return inner
