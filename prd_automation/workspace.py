"""
Workspace & Terminal
---------------------
File access scoped to the open workspace folder, and a shell channel that
runs commands in it. Paths passed to ``Workspace`` are relative to the
workspace root.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from prd_automation.exceptions import WorkspacePathError, WorkspaceUnavailableError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ShellTerminal:
    """
    A named shell process bound to a working directory. Lines sent with
    ``send_text`` are executed in order by the same shell.
    """

    def __init__(self, name: str, cwd: Path, shell: Optional[str] = None):
        self.name = name
        self.cwd = cwd
        self._shell = shell or os.environ.get("SHELL", "/bin/sh")
        self._process: Optional[subprocess.Popen] = None

    def wait_ready(self) -> None:
        if self._process is None:
            logger.debug("Starting terminal '%s' in %s", self.name, self.cwd)
            self._process = subprocess.Popen(
                [self._shell],
                cwd=str(self.cwd),
                stdin=subprocess.PIPE,
                text=True,
            )

    def send_text(self, text: str) -> None:
        if self._process is None or self._process.stdin is None:
            raise RuntimeError(f"Terminal '{self.name}' is not ready")
        logger.info("[%s] $ %s", self.name, text)
        self._process.stdin.write(text + "\n")
        self._process.stdin.flush()

    def focus(self) -> None:
        logger.debug("Terminal '%s' has focus", self.name)

    def dispose(self, timeout: float = 5.0) -> None:
        """Close the shell's input; stop it if it has not exited within ``timeout`` seconds."""
        if self._process is None:
            return
        if self._process.stdin is not None:
            self._process.stdin.close()
        try:
            self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.debug("Terminal '%s' still busy, terminating", self.name)
            self._process.terminate()
            self._process.wait()
        self._process = None


class Workspace:

    def __init__(self, root: Optional[PathLike] = None):
        self.root = Path(root).resolve() if root else None

    def require_root(self) -> Path:
        if self.root is None or not self.root.is_dir():
            raise WorkspaceUnavailableError("No workspace folder found")
        return self.root

    def resolve(self, path: PathLike) -> Path:
        root = self.require_root()
        target = (root / path).resolve()
        if target != root and root not in target.parents:
            raise WorkspacePathError(f"Path '{path}' is outside the workspace folder")
        return target

    def create_folder(self, path: PathLike) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    def exists(self, path: PathLike) -> bool:
        return self.resolve(path).exists()

    def write_file(self, path: PathLike, content: str) -> None:
        target = self.resolve(path)
        target.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s (%d chars)", target, len(content))

    def create_terminal(self, name: str) -> ShellTerminal:
        return ShellTerminal(name, cwd=self.require_root())
