"""Sanitization of clipboard text before it reaches the terminal.

Clipboard content is arbitrary: a copied log line can carry ANSI sequences
(including OSC 52, which writes the clipboard back) and square brackets that
Rich would read as markup.
"""

import re

from rich.markup import escape as rich_escape

# CSI, CSI-? mode switches, OSC (title, clipboard), and DCS/SOS/PM/APC strings
ANSI_ESCAPE_PATTERN = re.compile(
    r'\x1b\[[0-9;]*[ABCDEFGHJKSTfmnsu]|'
    r'\x1b\[\?[0-9;]*[hl]|'
    r'\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|'
    r'\x1b[PX^_][^\x1b]*\x1b\\'
)

# C0 controls except \t \n \r, plus DEL
CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def strip_terminal_escapes(text: str) -> str:
    """Remove ANSI escape sequences and control characters.

    Examples:
        >>> strip_terminal_escapes("\\x1b[31mRed\\x1b[0m")
        'Red'
    """
    text = ANSI_ESCAPE_PATTERN.sub('', text)
    return CONTROL_CHAR_PATTERN.sub('', text)


def sanitize_for_display(text: str) -> str:
    """Strip terminal escapes, then escape Rich markup."""
    return rich_escape(strip_terminal_escapes(text))
