"""
Rule-Based PRD Analyst (fallback engine)
-----------------------------------------
Works entirely offline, no LLM needed. Extracts features, user stories and
acceptance criteria from free text with regular expressions and keyword
checks. Same input always gives the same output.
"""

import re
from typing import List, Tuple

from prd_automation.models.test_model import AnalysisResult


class RuleAnalyst:

    FEATURE_PATTERNS = [
        re.compile(r"features?:\s*([^\n]+)", re.I),
        re.compile(r"functionalit(?:y|ies):\s*([^\n]+)", re.I),
        re.compile(r"requirements?:\s*([^\n]+)", re.I),
    ]

    # (keyword, feature), checked in this order, substring match on lower-cased text
    KEYWORD_FEATURES: List[Tuple[str, str]] = [
        ("login",    "User Authentication"),
        ("cart",     "Shopping Cart"),
        ("checkout", "Checkout Process"),
        ("search",   "Search Functionality"),
    ]

    STORY_PATTERN = re.compile(r"as an?\s+(\w+)[,\s]+i (?:want|need|would like)[^.]+", re.I)
    DEFAULT_STORY = "As a user, I want to use the system effectively"

    CRITERIA_PATTERNS = [
        re.compile(r"acceptance criteri(?:a|on):\s*([^\n]+)", re.I),
        re.compile(r"\bmust\s+([^\n]+)", re.I),
        re.compile(r"\bshould\s+([^\n]+)", re.I),
    ]

    def analyze(self, prd: str) -> AnalysisResult:
        """Extract features, stories and criteria. Test cases are left empty."""
        return AnalysisResult(
            features=self.extract_features(prd),
            user_stories=self.extract_user_stories(prd),
            acceptance_criteria=self.extract_acceptance_criteria(prd),
        )

    def extract_features(self, prd: str) -> List[str]:
        features = []
        for pattern in self.FEATURE_PATTERNS:
            for m in pattern.finditer(prd):
                features.append(m.group(1).strip())

        pl = prd.lower()
        for keyword, feature in self.KEYWORD_FEATURES:
            if keyword in pl:
                features.append(feature)

        # Features are the only list that gets deduplicated
        return list(dict.fromkeys(features))

    def extract_user_stories(self, prd: str) -> List[str]:
        stories = [m.group(0) for m in self.STORY_PATTERN.finditer(prd)]
        return stories or [self.DEFAULT_STORY]

    def extract_acceptance_criteria(self, prd: str) -> List[str]:
        criteria = []
        for pattern in self.CRITERIA_PATTERNS:
            for m in pattern.finditer(prd):
                criteria.append(m.group(1).strip())
        return criteria
