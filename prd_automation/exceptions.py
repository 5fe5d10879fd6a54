"""Exceptions raised by the PRD automation pipeline."""


class AutomationError(Exception):
    """Base exception for PRD automation errors."""
    pass


class ConfigurationError(AutomationError):
    """Raised when the remote model cannot be used because no API key is configured."""
    pass


class RemoteAnalysisError(AutomationError):
    """
    Raised when a round trip to the remote model fails.

    Covers transport errors and responses that are not JSON of the expected
    shape. Callers recover by taking the rule-based path.
    """

    def __init__(self, message: str, raw_response: str = ""):
        self.raw_response = raw_response
        super().__init__(message)


class WorkspaceUnavailableError(AutomationError):
    """Raised when test files must be persisted but no workspace folder is open."""
    pass


class UnsupportedFrameworkError(AutomationError):
    """Raised for an unknown framework, or one that has no code generation."""

    def __init__(self, framework: str, supported):
        self.framework = framework
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported framework '{framework}'. Expected one of: {', '.join(self.supported)}"
        )


class WorkspacePathError(AutomationError):
    """Raised when a workspace-relative path resolves outside the workspace folder."""
    pass
