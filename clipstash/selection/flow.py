"""Selection flow: pick an entry from history and paste it."""
from __future__ import annotations

import logging

from clipstash.history.store import HistoryStore
from clipstash.history.types import Item, ItemKind
from clipstash.selection.services import Choice, Paster, Presenter

logger = logging.getLogger(__name__)


class SelectionFlow:
    """Read-only consumer of the history.

    Works on a snapshot, so a capture session adding entries meanwhile does
    not shift what the user is choosing from. Never mutates the history.
    """

    def __init__(self, store: HistoryStore, presenter: Presenter, paster: Paster) -> None:
        self._store = store
        self._presenter = presenter
        self._paster = paster

    @staticmethod
    def to_choices(items: tuple[Item, ...]) -> list[Choice]:
        return [
            Choice(
                label=item.preview,
                icon=item.content if item.kind == ItemKind.IMAGE else None,
            )
            for item in items
        ]

    def run(self) -> Item | None:
        """Show the menu and paste the chosen item.

        Returns:
            The pasted item, or None if history is empty or nothing was chosen.

        Raises:
            ExternalServiceError: If the menu or the paste fails.
        """
        items = self._store.snapshot()
        if not items:
            logger.info("History is empty")
            return None

        index = self._presenter.choose(self.to_choices(items))
        if index is None:
            return None
        if not 0 <= index < len(items):
            logger.warning("Menu returned out-of-range index %d; ignoring", index)
            return None

        item = items[index]
        self._paster.paste(item)
        logger.debug("Pasted %s item %r", item.kind.value, item.preview)
        return item
