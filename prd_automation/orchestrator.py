"""
Orchestrator: Hybrid LLM-first with Rule-Based Fallback
--------------------------------------------------------
1. Quick-test input (a URL: line) → four canned login cases, no LLM.
2. Otherwise tries Google Gemini (single call, no retries).
3. If Gemini is not configured or fails, the rule-based engines analyse
   the PRD instead. The app always returns an AnalysisResult.
"""

import logging
from typing import List, Optional

from prd_automation.agents.code_generator import CodeGeneratorAgent
from prd_automation.agents.gemini_client import GeminiClient, ModelFactory, RemoteOutcome, attempt
from prd_automation.agents.prd_analyst import PRDAnalystAgent
from prd_automation.agents.test_executor import TestExecutorAgent
from prd_automation.config import Settings
from prd_automation.engines.requirement_parser import RequirementParser
from prd_automation.engines.rule_analyst import RuleAnalyst
from prd_automation.engines.rule_generator import RuleGenerator
from prd_automation.models.test_model import AnalysisResult, ExecutionPlan, TestCase
from prd_automation.workspace import Workspace

logger = logging.getLogger(__name__)


class Orchestrator:

    def __init__(self, settings: Optional[Settings] = None, workspace: Optional[Workspace] = None,
                 model_factory: Optional[ModelFactory] = None, executor: Optional[TestExecutorAgent] = None):
        self.settings = settings or Settings()
        self.workspace = workspace or Workspace(self.settings.workspace)

        client = GeminiClient(self.settings, model_factory)
        self._parser = RequirementParser()
        self._analyst = PRDAnalystAgent(client)
        self._rule_analyst = RuleAnalyst()
        self._rule_generator = RuleGenerator()
        self.generator = CodeGeneratorAgent(client, self.settings)
        self.executor = executor or TestExecutorAgent(self.workspace, self.generator, self.settings)

    # ── Public API ─────────────────────────────────────────────────────────

    def run(self, prd: str) -> AnalysisResult:
        """Analyse a PRD or quick-test snippet into a fresh AnalysisResult."""
        quick_test = self._parser.parse(prd)
        if quick_test is not None:
            logger.info("Detected URL-based test request for %s", quick_test.url)
            return self._rule_generator.quick_test_analysis(quick_test)

        outcome = self._try_remote(prd)
        if outcome.ok:
            return outcome.value

        logger.warning("Gemini analysis failed, using rule-based fallback: %s", outcome.error)
        return self._run_rule_based(prd)

    def generate_code(self, test_cases: List[TestCase], framework: str, only_missing: bool = True) -> int:
        """Generate code one case at a time; returns how many were generated."""
        if only_missing:
            return self.generator.generate_all(test_cases, framework)
        for tc in test_cases:
            self.generator.generate_for(tc, framework)
        return len(test_cases)

    def execute(self, test_cases: List[TestCase], framework: str, headed: bool = False,
                browser: Optional[str] = None) -> ExecutionPlan:
        return self.executor.execute(test_cases, framework, headed=headed, browser=browser)

    # ── LLM path ───────────────────────────────────────────────────────────

    def _try_remote(self, prd: str) -> RemoteOutcome:
        return attempt(self._analyst.analyze, prd)

    # ── Rule-based fallback ────────────────────────────────────────────────

    def _run_rule_based(self, prd: str) -> AnalysisResult:
        result = self._rule_analyst.analyze(prd)
        result.test_cases = self._rule_generator.from_keywords(prd)
        return result
