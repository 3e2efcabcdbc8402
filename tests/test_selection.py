"""Tests for the selection controller."""

from docmonitor_tables.controllers.selection import SelectionController


class TestSelectionController:
    """Tests for toggles and the page-scoped tri-state."""

    def test_toggle(self):
        selection = SelectionController()
        assert selection.toggle(1) == [1]
        assert selection.toggle(2) == [1, 2]
        assert selection.toggle(1) == [2]
        assert selection.is_selected(2)
        assert 1 not in selection

    def test_select_all_is_idempotent(self):
        selection = SelectionController(initial_selected=[9])
        first = selection.select_all([1, 2, 3])
        second = selection.select_all([1, 2, 3])
        assert first == second == [9, 1, 2, 3]

    def test_toggle_select_all_twice_restores(self):
        selection = SelectionController()
        selection.toggle_select_all([1, 2, 3])
        assert selection.selected_ids == [1, 2, 3]
        selection.toggle_select_all([1, 2, 3])
        assert selection.selected_ids == []

    def test_toggle_select_all_keeps_other_pages(self):
        selection = SelectionController(initial_selected=[10, 11])
        selection.toggle_select_all([1, 2])
        selection.toggle_select_all([1, 2])
        assert selection.selected_ids == [10, 11]

    def test_partial_page_selects_remaining(self):
        selection = SelectionController(initial_selected=[1])
        selection.toggle_select_all([1, 2, 3])
        assert selection.selected_ids == [1, 2, 3]

    def test_tri_state_scoped_to_visible_ids(self):
        selection = SelectionController(initial_selected=[1, 2])
        selection.set_visible_ids([1, 2])
        assert selection.is_all_selected
        assert not selection.is_partially_selected

        selection.set_visible_ids([2, 3])
        assert not selection.is_all_selected
        assert selection.is_partially_selected

        selection.set_visible_ids([4, 5])
        assert not selection.is_all_selected
        assert not selection.is_partially_selected

    def test_nothing_visible_is_not_all_selected(self):
        selection = SelectionController(initial_selected=[1])
        assert not selection.is_all_selected

    def test_deselect_all_and_notifications(self):
        calls = []
        selection = SelectionController(on_change=calls.append)
        selection.toggle("a")
        selection.select_all(["b"])
        selection.deselect_all()
        assert calls == [["a"], ["a", "b"], []]
        assert selection.selected_count == 0
        assert len(selection) == 0
