"""
PRD automation assistant: PRD text → test cases → Cypress / Playwright code → test run.
"""

from .models.test_model import AnalysisResult, ExecutionPlan, QuickTestDescriptor, TestCase
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "ExecutionPlan",
    "Orchestrator",
    "QuickTestDescriptor",
    "TestCase",
]
