"""Tests for the active-effect slot and effect runner."""

import pytest

from reactivity._tracking import ActiveEffectSlot, run_effect


class TestActiveEffectSlot:
    def test_starts_empty(self):
        slot = ActiveEffectSlot()
        assert slot.current is None
        assert repr(slot) == "ActiveEffectSlot(empty)"

    def test_holds_effect_while_running(self):
        slot = ActiveEffectSlot()
        seen = []

        def effect():
            seen.append(slot.current)

        run_effect(slot, effect)
        assert seen == [effect]
        assert slot.current is None

    def test_released_when_effect_raises(self):
        slot = ActiveEffectSlot()

        def effect():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            run_effect(slot, effect)
        assert slot.current is None

    def test_nested_run_restores_outer(self):
        """The outer effect gets the slot back after an inner run."""
        slot = ActiveEffectSlot()
        seen = []

        def inner():
            seen.append(slot.current)

        def outer():
            seen.append(slot.current)
            run_effect(slot, inner)
            seen.append(slot.current)

        run_effect(slot, outer)
        assert seen == [outer, inner, outer]
        assert slot.current is None

    def test_repr_names_effect(self):
        slot = ActiveEffectSlot()

        def render():
            pass

        with slot.running(render):
            assert repr(slot) == "ActiveEffectSlot(render)"
