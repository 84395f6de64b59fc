"""Selection flow and the external services it drives."""
from clipstash.selection.flow import SelectionFlow
from clipstash.selection.services import (
    Choice,
    Paster,
    Presenter,
    RofiPresenter,
    SystemPaster,
)

__all__ = [
    "Choice",
    "Paster",
    "Presenter",
    "RofiPresenter",
    "SelectionFlow",
    "SystemPaster",
]
