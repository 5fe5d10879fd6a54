"""
Quick-Test Requirement Parser
------------------------------
Detects the quick-test form of a PRD:

    URL: https://example.com/login
    Username: tomsmith
    Password: secret

Lines may appear in any order; only the URL is required.
"""

import re
from typing import Optional

from prd_automation.models.test_model import QuickTestDescriptor


class RequirementParser:

    URL_PATTERN      = re.compile(r"URL:\s*(https?://\S+)", re.I)
    USERNAME_PATTERN = re.compile(r"Username:\s*(\S+)", re.I)
    PASSWORD_PATTERN = re.compile(r"Password:\s*(\S+)", re.I)

    def parse(self, text: str) -> Optional[QuickTestDescriptor]:
        """Return a descriptor when a URL line is present, otherwise None."""
        found = {}
        for line in text.splitlines():
            for key, pattern in (("url", self.URL_PATTERN),
                                 ("username", self.USERNAME_PATTERN),
                                 ("password", self.PASSWORD_PATTERN)):
                m = pattern.search(line)
                if m:
                    found[key] = m.group(1)

        if not found.get("url"):
            return None
        return QuickTestDescriptor(
            url=found["url"],
            username=found.get("username"),
            password=found.get("password"),
        )
