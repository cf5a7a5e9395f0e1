"""
Tests de la directive Number et de la machine à états de numérotation.
"""

import logging

import pytest

from ebook_renderer.book import Number, NumberKind
from ebook_renderer.rendering import RendererState


def make_state(numbering=1, supports_parts=True):
    return RendererState(
        default_numbering=numbering,
        specified_numbering=numbering,
        supports_parts=supports_parts,
        format_name="TEST",
    )


class TestNumber:
    """Tests pour la directive Number."""

    def test_specified_requires_value(self):
        with pytest.raises(ValueError):
            Number(NumberKind.SPECIFIED)

    def test_default_rejects_value(self):
        with pytest.raises(ValueError):
            Number(NumberKind.DEFAULT, 3)

    def test_is_part(self):
        assert Number.default_part().is_part()
        assert Number.specified_part(2).is_part()
        assert not Number.default().is_part()
        assert not Number.hidden().is_part()

    def test_is_hidden(self):
        assert Number.hidden().is_hidden()
        assert not Number.unnumbered().is_hidden()

    def test_to_non_part(self):
        assert Number.specified_part(4).to_non_part() == Number.specified(4)
        assert Number.unnumbered_part().to_non_part() == Number.unnumbered()
        assert Number.hidden().to_non_part() == Number.hidden()

    def test_str(self):
        assert str(Number.specified(5)) == "specified(5)"
        assert str(Number.hidden()) == "hidden"


class TestRendererState:
    """Tests pour RendererState.enter_chapter()."""

    def test_initial_state(self):
        state = make_state()
        assert state.current_numbering == 1
        assert state.current_chapter == 1
        assert state.toc == []

    def test_unnumbered_disables_numbering(self):
        state = make_state()
        state.enter_chapter(Number.unnumbered())
        assert not state.numbering_enabled
        assert not state.current_hide

    def test_default_restores_numbering(self):
        state = make_state()
        state.enter_chapter(Number.unnumbered())
        state.enter_chapter(Number.default())
        assert state.numbering_enabled

    def test_specified_sets_counter(self):
        state = make_state()
        state.enter_chapter(Number.specified(5))
        assert state.numbering_enabled
        assert state.next_chapter_number() == 5

    def test_specified_then_default_continues(self):
        """Specified(5) puis Default : les numéros 5 puis 6."""
        state = make_state()
        state.enter_chapter(Number.specified(5))
        first = state.next_chapter_number()
        state.enter_chapter(Number.default())
        second = state.next_chapter_number()
        assert (first, second) == (5, 6)

    def test_hidden(self):
        state = make_state()
        state.enter_chapter(Number.hidden())
        assert state.current_hide
        assert not state.numbering_enabled
        # La directive suivante lève le masquage
        state.enter_chapter(Number.default())
        assert not state.current_hide

    def test_unnumbered_does_not_reset_counter(self):
        state = make_state()
        state.enter_chapter(Number.default())
        state.next_chapter_number()
        state.enter_chapter(Number.unnumbered())
        state.enter_chapter(Number.default())
        assert state.next_chapter_number() == 2

    def test_specified_part_sets_counter(self):
        """SpecifiedPart(n) force le compteur commun à n, comme Specified(n)."""
        state = make_state()
        state.enter_chapter(Number.specified_part(3))
        assert state.current_part
        assert state.numbering_enabled
        assert state.next_chapter_number() == 3

    def test_specified_part_then_default_continues(self):
        state = make_state()
        state.enter_chapter(Number.specified_part(5))
        first = state.next_chapter_number()
        state.enter_chapter(Number.default())
        assert (first, state.next_chapter_number()) == (5, 6)

    def test_parts_unsupported_warns(self, caplog):
        state = make_state(supports_parts=False)
        with caplog.at_level(logging.WARNING):
            state.enter_chapter(Number.specified_part(4))

        assert not state.current_part
        assert state.next_chapter_number() == 4
        assert "parties" in caplog.text
        assert "TEST" in caplog.text

    def test_distinct_numbering_inputs(self):
        """Default et Specified restaurent chacun leur propre profondeur."""
        state = RendererState(default_numbering=2, specified_numbering=0)
        state.enter_chapter(Number.specified(7))
        assert state.current_numbering == 0
        state.enter_chapter(Number.default())
        assert state.current_numbering == 2
