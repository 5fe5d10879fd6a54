"""
PRD Analyst Agent  (LLM-powered)
----------------------------------
Uses Google Gemini to read a PRD and return an AnalysisResult with
features, user stories, acceptance criteria and test cases.

This agent has no fallback of its own: it either returns a complete
AnalysisResult or raises. The Orchestrator decides what happens next.
"""

import json
import re

from prd_automation.agents.gemini_client import GeminiClient
from prd_automation.engines.code_templates import strip_code_fences
from prd_automation.exceptions import RemoteAnalysisError
from prd_automation.models.test_model import AnalysisResult


class PRDAnalystAgent:
    """
    LLM-powered agent that analyses a PRD and returns an AnalysisResult.
    """

    SYSTEM_PROMPT = """You are an expert QA automation engineer. Analyze the given PRD and generate comprehensive test cases.
Return the response in JSON format with the following structure:
{
  "features": ["list of features"],
  "userStories": ["list of user stories"],
  "acceptanceCriteria": ["list of acceptance criteria"],
  "testCases": [
    {
      "id": "unique-id",
      "name": "test name",
      "description": "test description",
      "steps": ["step 1", "step 2"],
      "expectedResult": "expected outcome"
    }
  ]
}
Return ONLY valid JSON: no markdown, no explanation, no code fences.
"""

    _LIST_KEYS = ("features", "userStories", "acceptanceCriteria")
    _ID_PATTERN = re.compile(r"[\w.-]+")

    def __init__(self, client: GeminiClient):
        self._client = client

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def analyze(self, prd: str) -> AnalysisResult:
        """Analyse a PRD. Raises ConfigurationError or RemoteAnalysisError."""
        prompt = f"Analyze this PRD and generate comprehensive test cases:\n\n{prd}"
        raw = self._client.complete(self.SYSTEM_PROMPT, prompt)
        data = self._parse_json(raw)
        self._validate(data, raw)

        result = AnalysisResult.from_dict(data)
        for tc in result.test_cases:
            tc.status = "pending"
        return result

    # ------------------------------------------------------------------ #
    # JSON parsing
    # ------------------------------------------------------------------ #

    def _parse_json(self, raw: str) -> dict:
        cleaned = strip_code_fences(raw)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            # Try to extract the first {...} block
            m = re.search(r"\{.*\}", cleaned, re.DOTALL)
            if m:
                try:
                    return json.loads(m.group())
                except json.JSONDecodeError:
                    pass
        raise RemoteAnalysisError("Gemini response is not valid JSON", raw_response=raw)

    def _validate(self, data, raw: str) -> None:
        def fail(reason: str):
            raise RemoteAnalysisError(f"Gemini response has the wrong shape: {reason}", raw_response=raw)

        if not isinstance(data, dict):
            fail("top level is not an object")
        for key in self._LIST_KEYS:
            if key in data and not isinstance(data[key], list):
                fail(f"'{key}' is not a list")
        cases = data.get("testCases")
        if not isinstance(cases, list) or not cases:
            fail("'testCases' is missing or empty")
        for i, tc in enumerate(cases, 1):
            if not isinstance(tc, dict) or not isinstance(tc.get("name"), str):
                fail(f"test case {i} has no name")
            if not isinstance(tc.get("steps", []), list):
                fail(f"test case {i} steps is not a list")

        # ids become file names under tests/<framework>/generated/
        seen = set()
        for i, tc in enumerate(cases, 1):
            case_id = str(tc.get("id") or f"tc-{i:03d}")
            if not self._ID_PATTERN.fullmatch(case_id) or ".." in case_id:
                fail(f"test case {i} has an unusable id {case_id!r}")
            if case_id in seen:
                fail(f"duplicate test case id {case_id!r}")
            seen.add(case_id)
