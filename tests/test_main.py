import io
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from statuscheck.main import USAGE, main
from statuscheck.runner import ProgramError


class MainTests(unittest.TestCase):
    def test_missing_url_prints_usage_and_fails(self) -> None:
        buf = io.StringIO()
        with patch("statuscheck.main.Program") as program_cls, patch(
            "statuscheck.checks.http_check.requests.get"
        ) as mock_get, redirect_stdout(buf):
            code = main([])

        self.assertEqual(code, 1)
        self.assertEqual(buf.getvalue(), "You must enter a URL to check\n")
        self.assertEqual(USAGE, "You must enter a URL to check")
        program_cls.assert_not_called()
        mock_get.assert_not_called()

    def test_runs_the_display_loop_for_the_first_argument(self) -> None:
        with patch("statuscheck.main.Program") as program_cls:
            code = main(["http://example.com", "ignored"])

        self.assertEqual(code, 0)
        model = program_cls.call_args.args[0]
        self.assertEqual(model.state.target, "http://example.com")
        program_cls.return_value.run.assert_called_once_with()

    def test_harness_failure_is_reported(self) -> None:
        buf = io.StringIO()
        with patch("statuscheck.main.Program") as program_cls, redirect_stdout(buf):
            program_cls.return_value.run.side_effect = ProgramError("no tty")
            code = main(["http://example.com"])

        self.assertEqual(code, 1)
        self.assertEqual(buf.getvalue(), "Oh no, there was an error: no tty\n")


if __name__ == "__main__":
    unittest.main()
