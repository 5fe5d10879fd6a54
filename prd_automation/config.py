"""
Configuration
--------------
Loads the Gemini API key and execution defaults from a .env file or
environment variables. Values are read at call time, so a key set while the
app is running is seen by the next request.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

GEMINI_MODELS = ("gemini-2.0-flash", "gemini-2.0-flash-lite", "gemini-1.5-pro")
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TEST_TIMEOUT_MS = 30000

_TRUTHY = {"1", "true", "yes", "on"}


def load_env_file(path: Path) -> None:
    """Load KEY=VALUE lines into os.environ without overriding existing values."""
    if not path.exists():
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                os.environ.setdefault(k.strip(), v.strip())


# Load .env manually (no python-dotenv required)
load_env_file(Path(__file__).parent.parent / ".env")


class Settings:
    """
    Read-through view of the configuration.

    The API key resolves in a fixed order: a key set at runtime with
    ``set_api_key``, then GEMINI_API_KEY from the environment, else None.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ
        self._api_key_override: Optional[str] = None

    def set_api_key(self, api_key: Optional[str]) -> None:
        self._api_key_override = api_key.strip() if api_key else None

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key_override or self._environ.get("GEMINI_API_KEY") or None

    @property
    def model(self) -> str:
        name = self._environ.get("GEMINI_MODEL", "").strip()
        if not name:
            return GEMINI_MODELS[0]
        if name not in GEMINI_MODELS:
            logger.warning("Unknown GEMINI_MODEL %r, using %s", name, GEMINI_MODELS[0])
            return GEMINI_MODELS[0]
        return name

    @property
    def base_url(self) -> str:
        return self._environ.get("AUTOMATION_BASE_URL") or DEFAULT_BASE_URL

    @property
    def test_timeout_ms(self) -> int:
        raw = self._environ.get("AUTOMATION_TEST_TIMEOUT", "")
        try:
            return int(raw) if raw else DEFAULT_TEST_TIMEOUT_MS
        except ValueError:
            logger.warning("AUTOMATION_TEST_TIMEOUT=%r is not a number, using %d", raw, DEFAULT_TEST_TIMEOUT_MS)
            return DEFAULT_TEST_TIMEOUT_MS

    @property
    def debug(self) -> bool:
        return self._environ.get("AUTOMATION_DEBUG", "").strip().lower() in _TRUTHY

    @property
    def workspace(self) -> Optional[str]:
        return self._environ.get("AUTOMATION_WORKSPACE") or None

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "models": list(GEMINI_MODELS),
            "base_url": self.base_url,
            "test_timeout_ms": self.test_timeout_ms,
            "debug": self.debug,
            "api_key_configured": self.api_key is not None,
        }


def configure_logging(debug: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Reduce noise from some libraries
    logging.getLogger('google').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
