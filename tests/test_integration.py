"""Integration tests for the interactive contexts page.

These drive the ``page`` command with scripted input against the in-memory
backend and check both what the user sees and what reached the backend.
"""

import pytest
from click.testing import CliRunner

from context_admin.cli.main import cli

from conftest import BASE_URL, make_session


@pytest.fixture
def run_page(session):
    """Run the page command with the given keystrokes."""
    def _run(user_input: str, *options: str):
        return CliRunner().invoke(
            cli,
            ["--base-url", BASE_URL, *options, "page"],
            input=user_input,
            obj={"session": session},
        )
    return _run


class TestPageSession:
    """End-to-end page sessions."""

    def test_shows_list_and_quits(self, run_page, backend):
        result = run_page("q\n")

        assert result.exit_code == 0
        assert "Context Settings by Role" in result.output
        assert "1. Backend Developer" in result.output
        assert backend.methods() == ["GET"]

    def test_end_of_input_quits(self, run_page):
        result = run_page("")

        assert result.exit_code == 0

    def test_add(self, run_page, backend):
        result = run_page("a\nCritic\nCritique everything.\nq\n", "--maintainer", "reviewer")

        assert result.exit_code == 0
        assert backend.methods() == ["GET", "POST", "GET"]
        assert backend.requests[1].body["maintainedBy"] == "reviewer"
        assert "3. Critic" in result.output

    def test_add_cancel(self, run_page, backend):
        result = run_page("a\n-\nq\n")

        assert result.exit_code == 0
        assert backend.methods() == ["GET"]

    def test_edit(self, run_page, backend):
        result = run_page("e 1\n\nOwn the APIs.\nq\n")

        assert result.exit_code == 0
        assert backend.methods() == ["GET", "PUT", "GET"]
        assert backend.profiles["1"]["basePrompt"] == "Own the APIs."
        assert backend.profiles["1"]["maintainedBy"] == "alice"

    def test_delete(self, run_page, backend):
        result = run_page("d 2\ny\nq\n")

        assert result.exit_code == 0
        assert 'Delete context "QA Engineer"?' in result.output
        assert backend.methods() == ["GET", "DELETE", "GET"]
        assert list(backend.profiles) == ["1"]

    def test_delete_declined(self, run_page, backend):
        result = run_page("d 2\nn\nq\n")

        assert result.exit_code == 0
        assert backend.methods() == ["GET"]

    def test_bad_number(self, run_page):
        result = run_page("e 9\nd x\nq\n")

        assert "No context numbered '9'" in result.output
        assert "No context numbered 'x'" in result.output

    def test_unknown_action(self, run_page):
        result = run_page("zz\nq\n")

        assert "Unknown action: zz" in result.output

    def test_empty_backend(self, empty_backend):
        result = CliRunner().invoke(
            cli,
            ["--base-url", BASE_URL, "page"],
            input="q\n",
            obj={"session": make_session(empty_backend)},
        )

        assert "No contexts registered." in result.output


class TestPageErrors:
    """Error surfacing and recovery on the page."""

    def test_load_error_then_reload(self, run_page, backend):
        backend.fail_once["GET"] = 500

        result = run_page("a\nr\nq\n")

        assert result.exit_code == 0
        assert "Error: Failed to fetch contexts" in result.output
        assert "Press r to retry or q to quit" in result.output
        assert "1. Backend Developer" in result.output
        assert backend.methods() == ["GET", "GET"]

    def test_failed_save_resumes_editor(self, run_page, backend):
        backend.fail_once["POST"] = 500

        # Save fails, reload, then accept the remembered form as-is
        result = run_page("a\nCritic\nFirst draft.\nr\n\n\nq\n")

        assert result.exit_code == 0
        assert "Error: Failed to save context" in result.output
        assert backend.methods() == ["GET", "POST", "GET", "POST", "GET"]
        assert backend.requests[3].body["role"] == "Critic"
        assert backend.requests[3].body["basePrompt"] == "First draft."
        assert "3. Critic" in result.output
