"""Tests for the selection flow."""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from clipstash.core.errors import ExternalServiceError
from clipstash.history.store import HistoryStore
from clipstash.history.types import Item
from clipstash.selection.flow import SelectionFlow
from clipstash.selection.services import Choice

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path):
    store = HistoryStore(tmp_path / "history.json")
    store.add(Item.text("older text", captured_at=BASE_TIME))
    store.add(Item.image(tmp_path / "img_1.png", captured_at=BASE_TIME + timedelta(seconds=1)))
    store.add(Item.text("newest text", captured_at=BASE_TIME + timedelta(seconds=2)))
    return store


def presenter_returning(index):
    presenter = Mock()
    presenter.choose.return_value = index
    return presenter


class TestSelectionFlow:
    """Tests for SelectionFlow.run()."""

    def test_choices_follow_history_order(self, store, tmp_path):
        presenter = presenter_returning(None)

        SelectionFlow(store, presenter, Mock()).run()

        (choices,) = presenter.choose.call_args.args
        assert choices == [
            Choice("newest text"),
            Choice("[Image] img_1.png", icon=str(tmp_path / "img_1.png")),
            Choice("older text"),
        ]

    def test_selected_item_is_pasted(self, store):
        paster = Mock()

        item = SelectionFlow(store, presenter_returning(2), paster).run()

        assert item.content == "older text"
        paster.paste.assert_called_once_with(item)

    def test_selection_does_not_change_history(self, store):
        before = store.snapshot()

        SelectionFlow(store, presenter_returning(2), Mock()).run()

        assert store.snapshot() == before

    def test_cancelled_menu_pastes_nothing(self, store):
        paster = Mock()

        assert SelectionFlow(store, presenter_returning(None), paster).run() is None
        paster.paste.assert_not_called()

    @pytest.mark.parametrize("index", [3, 99, -1])
    def test_out_of_range_index_ignored(self, store, index):
        paster = Mock()

        assert SelectionFlow(store, presenter_returning(index), paster).run() is None
        paster.paste.assert_not_called()

    def test_empty_history_skips_menu(self, tmp_path):
        presenter = Mock()
        empty = HistoryStore(tmp_path / "empty" / "history.json")

        assert SelectionFlow(empty, presenter, Mock()).run() is None
        presenter.choose.assert_not_called()

    def test_service_errors_propagate(self, store):
        paster = Mock()
        paster.paste.side_effect = ExternalServiceError("xdotool", "xdotool not found")

        with pytest.raises(ExternalServiceError):
            SelectionFlow(store, presenter_returning(0), paster).run()

    def test_uses_snapshot_taken_before_menu(self, store):
        """Entries added while the menu is open do not shift the chosen index."""
        paster = Mock()
        presenter = Mock()

        def choose_and_capture(choices):
            store.add(Item.text("captured meanwhile", captured_at=BASE_TIME + timedelta(seconds=9)))
            return 0

        presenter.choose.side_effect = choose_and_capture

        item = SelectionFlow(store, presenter, paster).run()

        assert item.content == "newest text"
