"""Test Workspace file access and the ShellTerminal shell channel."""

from pathlib import Path

import pytest

from prd_automation.exceptions import WorkspacePathError
from prd_automation.workspace import ShellTerminal, Workspace


class TestWorkspace:

    def test_write_inside_root(self, tmp_path):
        ws = Workspace(tmp_path)
        ws.create_folder("tests/cypress/generated")

        ws.write_file("tests/cypress/generated/a.cy.js", "// a")

        assert (tmp_path / "tests/cypress/generated/a.cy.js").read_text() == "// a"
        assert ws.exists("tests/cypress/generated/a.cy.js")

    @pytest.mark.parametrize("path", ["../escape.js", "tests/../../escape.js", "/etc/escape.js"])
    def test_paths_outside_root_refused(self, tmp_path, path):
        root = tmp_path / "project"
        root.mkdir()
        ws = Workspace(root)

        with pytest.raises(WorkspacePathError):
            ws.write_file(path, "// x")
        assert not (tmp_path / "escape.js").exists()

    def test_dotted_path_staying_inside_is_allowed(self, tmp_path):
        ws = Workspace(tmp_path)

        assert ws.resolve("tests/../cypress.config.js") == tmp_path.resolve() / "cypress.config.js"


@pytest.mark.skipif(not Path("/bin/sh").exists(), reason="needs a POSIX shell")
class TestShellTerminal:

    def test_commands_run_in_order_in_cwd(self, tmp_path):
        terminal = ShellTerminal("Cypress Tests", cwd=tmp_path, shell="/bin/sh")

        terminal.wait_ready()
        terminal.send_text("echo first > out.txt")
        terminal.send_text("echo second >> out.txt")
        terminal.focus()
        terminal.dispose()

        assert (tmp_path / "out.txt").read_text().splitlines() == ["first", "second"]

    def test_send_before_ready(self, tmp_path):
        terminal = ShellTerminal("Tests", cwd=tmp_path, shell="/bin/sh")

        with pytest.raises(RuntimeError):
            terminal.send_text("echo hi")

    def test_dispose_stops_a_busy_shell(self, tmp_path):
        terminal = ShellTerminal("Tests", cwd=tmp_path, shell="/bin/sh")
        terminal.wait_ready()
        terminal.send_text("sleep 5")

        terminal.dispose(timeout=0.2)
        terminal.dispose()
