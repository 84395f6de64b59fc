"""Tests for terminal sanitization of clipboard text."""

from clipstash.core.text_safety import sanitize_for_display, strip_terminal_escapes


class TestStripTerminalEscapes:
    def test_color_codes_removed(self):
        assert strip_terminal_escapes("\x1b[31mRed\x1b[0m") == "Red"

    def test_osc_clipboard_write_removed(self):
        """OSC 52 would let a listing overwrite the clipboard."""
        assert strip_terminal_escapes("a\x1b]52;c;aGk=\x07b") == "ab"

    def test_control_chars_removed_but_whitespace_kept(self):
        assert strip_terminal_escapes("x\x00y\x07z\tw\nv") == "xyz\tw\nv"


class TestSanitizeForDisplay:
    def test_escapes_markup(self):
        assert sanitize_for_display("[red]alert[/red]") == "\\[red]alert\\[/red]"

    def test_plain_text_unchanged(self):
        assert sanitize_for_display("normal text") == "normal text"
