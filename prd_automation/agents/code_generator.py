"""
Code Generator Agent  (LLM-first with Rule-Based Fallback)
-----------------------------------------------------------
Turns one TestCase into a Cypress or Playwright spec file.

1. Quick-test cases (test data with a URL) always use the URL template, so
   the URL and credentials are reproduced exactly. Gemini is not called.
2. Otherwise one Gemini call writes the code; markdown fences are stripped.
3. If Gemini is not configured or fails, the step translator in
   engines.code_templates writes the code instead.
"""

import logging

from prd_automation.agents.gemini_client import GeminiClient, attempt
from prd_automation.config import Settings
from prd_automation.engines import code_templates
from prd_automation.exceptions import RemoteAnalysisError, UnsupportedFrameworkError
from prd_automation.models.test_model import CODEGEN_FRAMEWORKS, TestCase

logger = logging.getLogger(__name__)


class CodeGeneratorAgent:

    SYSTEM_PROMPTS = {
        "cypress": """You are an expert Cypress automation engineer. Generate clean, production-ready Cypress test code.
Use modern Cypress best practices including:
- Proper selectors (data-cy, data-test, id, or class attributes)
- Appropriate assertions
- Clear comments
- Error handling
- Proper waits and timeouts
If the test case includes a URL, use cy.visit() with that exact URL.
Return only the code.""",
        "playwright": """You are an expert Playwright automation engineer. Generate clean, production-ready Playwright test code.
Use modern Playwright best practices including:
- Proper locators
- Async/await patterns
- Appropriate assertions with expect
- Error handling
- Page object pattern when appropriate
Return only the code.""",
    }

    def __init__(self, client: GeminiClient, settings: Settings):
        self._client = client
        self._settings = settings

    # ── Public API ─────────────────────────────────────────────────────────

    def generate(self, tc: TestCase, framework: str) -> str:
        if framework not in CODEGEN_FRAMEWORKS:
            raise UnsupportedFrameworkError(framework, CODEGEN_FRAMEWORKS)

        if tc.test_data is not None and tc.test_data.url:
            return code_templates.render_url(tc, framework, self._settings.test_timeout_ms)

        outcome = attempt(self._generate_remote, tc, framework)
        if outcome.ok:
            return outcome.value

        logger.warning("Code generation for %s via Gemini failed, using rule-based templates: %s",
                       tc.id, outcome.error)
        return code_templates.render_steps(tc, framework)

    def generate_for(self, tc: TestCase, framework: str) -> str:
        """Generate, store the code on the test case and mark it generated."""
        code = self.generate(tc, framework)
        tc.code[framework] = code
        if tc.status == "pending":
            tc.advance("generated")
        return code

    def generate_all(self, cases, framework: str) -> int:
        """Generate code for every case that has none yet for ``framework``; returns the count."""
        count = 0
        for tc in cases:
            if framework not in tc.code:
                self.generate_for(tc, framework)
                count += 1
        return count

    # ── LLM path ───────────────────────────────────────────────────────────

    def _generate_remote(self, tc: TestCase, framework: str) -> str:
        framework_name = framework.capitalize()
        prompt = (
            f"Generate {framework_name} test code for:\n"
            f"Test Name: {tc.name}\n"
            f"Description: {tc.description}\n"
            f"Steps: {', '.join(tc.steps)}\n"
            f"Expected Result: {tc.expected_result}"
        )
        raw = self._client.complete(self.SYSTEM_PROMPTS[framework], prompt)
        code = code_templates.strip_code_fences(raw)
        if not code:
            raise RemoteAnalysisError("Gemini returned no code", raw_response=raw)
        return code
