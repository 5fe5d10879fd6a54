"""Pytest configuration and fixtures for PRD automation tests."""

import json

import pytest

from prd_automation.config import Settings
from prd_automation.orchestrator import Orchestrator
from prd_automation.workspace import Workspace


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    def __init__(self, factory, model_name, system_instruction):
        self._factory = factory
        self.model_name = model_name
        self.system_instruction = system_instruction

    def generate_content(self, prompt):
        self._factory.calls.append((self.model_name, self.system_instruction, prompt))
        if self._factory.error is not None:
            raise self._factory.error
        return FakeResponse(self._factory.reply)


class FakeModelFactory:
    """Stands in for genai.GenerativeModel; records every generate_content call."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __call__(self, model_name, system_instruction):
        return FakeModel(self, model_name, system_instruction)


class RecordingTerminal:
    def __init__(self, name, cwd):
        self.name = name
        self.cwd = cwd
        self.ready = False
        self.sent = []
        self.focused = False

    def wait_ready(self):
        self.ready = True

    def send_text(self, text):
        assert self.ready, "send_text before wait_ready"
        self.sent.append(text)

    def focus(self):
        self.focused = True

    def dispose(self):
        pass


class RecordingWorkspace(Workspace):
    """Real file access in a temp dir; terminals only record commands."""

    def __init__(self, root=None):
        super().__init__(root)
        self.terminals = []

    def create_terminal(self, name):
        terminal = RecordingTerminal(name, self.require_root())
        self.terminals.append(terminal)
        return terminal


@pytest.fixture
def settings():
    """Settings with no API key and default values."""
    return Settings(environ={})


@pytest.fixture
def keyed_settings():
    return Settings(environ={"GEMINI_API_KEY": "test-key"})


@pytest.fixture
def workspace(tmp_path):
    return RecordingWorkspace(tmp_path)


@pytest.fixture
def analysis_reply():
    return json.dumps({
        "features": ["Checkout"],
        "userStories": ["As a shopper, I want to pay by card"],
        "acceptanceCriteria": ["Card number must pass Luhn validation"],
        "testCases": [
            {
                "id": "pay-001",
                "name": "Pay with valid card",
                "description": "Shopper pays with a valid card",
                "steps": ["Navigate to checkout", "Enter card number", "Click pay button"],
                "expectedResult": "Confirmation is displayed",
                "status": "passed",
            },
            {
                "id": "pay-002",
                "name": "Pay with invalid card",
                "description": "Shopper sees an error for an invalid card",
                "steps": ["Navigate to checkout", "Enter invalid card number", "Click pay button"],
                "expectedResult": "Error message is shown",
            },
        ],
    })


@pytest.fixture
def quick_test_prd():
    return "Test login for:\nURL: https://example.com/login\nUsername: u\nPassword: p"


@pytest.fixture
def make_orchestrator(workspace):
    """Build an Orchestrator wired to a fake Gemini model and the recording workspace."""

    def _make(settings, factory=None):
        orch = Orchestrator(settings, workspace=workspace, model_factory=factory or FakeModelFactory())
        orch.sleeps = []
        orch.executor._sleep = orch.sleeps.append
        return orch

    return _make


@pytest.fixture
def fake_model():
    """The FakeModelFactory class, for tests that need custom replies."""
    return FakeModelFactory
