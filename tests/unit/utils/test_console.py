"""Tests for the shared rich consoles."""

from session_continuity.utils.console import get_console, get_err_console, print_notice


class TestConsoles:
    """Tests for the console singletons."""

    def test_singletons(self):
        assert get_console() is get_console()
        assert get_err_console() is get_err_console()
        assert get_err_console().stderr is True

    def test_notice_goes_to_stderr(self, capsys):
        print_notice("[resume] No ledger found", "yellow")

        captured = capsys.readouterr()
        assert "[resume] No ledger found" in captured.err
        assert captured.out == ""
