"""
Rule-Based Code Templates (fallback engine)
--------------------------------------------
Deterministic Cypress / Playwright code for a TestCase:

  - URL templates   → quick-test login cases; URL and credentials are
                      written verbatim
  - step translator → every step is matched against STEP_RULES (first match
                      wins) and rendered with the framework's command
                      template; unknown steps become a comment
  - assertions      → the expected result is matched against
                      ASSERTION_RULES, defaulting to a success check

Output depends only on the test case and the timeout, so repeated calls
return byte-identical code.
"""

import re
from typing import Callable, List, Optional, Tuple

from prd_automation.exceptions import UnsupportedFrameworkError
from prd_automation.models.test_model import CODEGEN_FRAMEWORKS, QuickTestDescriptor, TestCase

DEFAULT_TIMEOUT_MS = 60000

_FENCE = re.compile(r"```[\w+#.-]*[ \t]*\n?")
_URL = re.compile(r"https?://[^\s\"']+")

Rule = Tuple[str, Callable[[str], bool]]

# ── Rule tables (evaluated top to bottom, first match wins) ──────────────

STEP_RULES: List[Rule] = [
    ("navigate", lambda s: "navigate" in s or "go to" in s),
    ("click",    lambda s: "click" in s),
    ("enter",    lambda s: "enter" in s or "type" in s),
    ("select",   lambda s: "select" in s),
    ("verify",   lambda s: "verify" in s or "check" in s),
]

ASSERTION_RULES: List[Rule] = [
    ("redirect", lambda r: "redirect" in r),
    ("display",  lambda r: "display" in r or "show" in r),
    ("error",    lambda r: "error" in r),
]

ELEMENT_RULES: List[Tuple[str, str]] = [
    ("button",   '[data-test="button"]'),
    ("input",    '[data-test="input"]'),
    ("email",    '[data-test="email"]'),
    ("password", '[data-test="password"]'),
    ("search",   '[data-test="search"]'),
]
DEFAULT_ELEMENT = '[data-test="element"]'

COMMAND_TEMPLATES = {
    "cypress": {
        "navigate": "cy.visit({target});",
        "click":    "cy.get({selector}).click();",
        "enter":    "cy.get({selector}).type('test data');",
        "select":   "cy.get({selector}).select('option');",
        "verify":   "cy.get('[data-test]').should('exist');",
    },
    "playwright": {
        "navigate": "await page.goto({target});",
        "click":    "await page.click({selector});",
        "enter":    "await page.fill({selector}, 'test data');",
        "select":   "await page.selectOption({selector}, 'option');",
        "verify":   "await expect(page.locator('[data-test]')).toBeVisible();",
    },
}

ASSERTION_TEMPLATES = {
    "cypress": {
        "redirect": "cy.url().should('include', '/dashboard');",
        "display":  "cy.get('[data-test=\"result\"]').should('be.visible');",
        "error":    "cy.get('[data-test=\"error\"]').should('contain', 'Error');",
        "success":  "cy.get('[data-test=\"success\"]').should('exist');",
    },
    "playwright": {
        "redirect": "await expect(page).toHaveURL(/.*dashboard/);",
        "display":  "await expect(page.locator('[data-test=\"result\"]')).toBeVisible();",
        "error":    "await expect(page.locator('[data-test=\"error\"]')).toContainText('Error');",
        "success":  "await expect(page.locator('[data-test=\"success\"]')).toBeVisible();",
    },
}

# Quick-test login scenarios, matched on the lower-cased test case name
LOGIN_SCENARIO_RULES: List[Rule] = [
    ("empty",            lambda n: "empty" in n),
    ("invalid_username", lambda n: "invalid username" in n),
    ("invalid_password", lambda n: "invalid password" in n),
]

INVALID_USERNAME = "invalid_user"
INVALID_PASSWORD = "invalid_password"


# ── Helpers ──────────────────────────────────────────────────────────────

def strip_code_fences(code: str) -> str:
    """Remove ``` markers (with optional language tag) and surrounding whitespace."""
    return _FENCE.sub("", code).strip()


def js_string(value: str) -> str:
    """Single-quoted JavaScript string literal."""
    escaped = (value.replace("\\", "\\\\")
                    .replace("'", "\\'")
                    .replace("\n", "\\n")
                    .replace("\r", ""))
    return f"'{escaped}'"


def _one_line(text: str) -> str:
    return " ".join(text.split())


def first_match(rules: List[Rule], text: str) -> Optional[str]:
    """Name of the first rule whose predicate accepts the lower-cased text."""
    tl = text.lower()
    for name, matches in rules:
        if matches(tl):
            return name
    return None


def classify_step(step: str) -> Optional[str]:
    return first_match(STEP_RULES, step)


def classify_expected(result: str) -> str:
    return first_match(ASSERTION_RULES, result) or "success"


def extract_element(step: str) -> str:
    sl = step.lower()
    for keyword, selector in ELEMENT_RULES:
        if keyword in sl:
            return selector
    return DEFAULT_ELEMENT


def _check_framework(framework: str) -> None:
    if framework not in CODEGEN_FRAMEWORKS:
        raise UnsupportedFrameworkError(framework, CODEGEN_FRAMEWORKS)


# ── Step translator ──────────────────────────────────────────────────────

def step_to_command(step: str, framework: str) -> str:
    _check_framework(framework)
    kind = classify_step(step)
    if kind is None:
        return f"// {_one_line(step)}"

    url = _URL.search(step)
    target = js_string(url.group(0).rstrip(".,;")) if url else "'/'"
    return COMMAND_TEMPLATES[framework][kind].format(
        target=target,
        selector=js_string(extract_element(step)),
    )


def expected_to_assertion(result: str, framework: str) -> str:
    _check_framework(framework)
    return ASSERTION_TEMPLATES[framework][classify_expected(result)]


def render_steps(tc: TestCase, framework: str) -> str:
    """Full spec file built from the step translator."""
    _check_framework(framework)
    steps = [step_to_command(s, framework) for s in tc.steps]
    assertion = expected_to_assertion(tc.expected_result, framework)
    verify = f"// Verify: {_one_line(tc.expected_result)}"

    if framework == "cypress":
        lines = [
            f"describe({js_string(tc.name)}, () => {{",
            "  beforeEach(() => {",
            "    cy.visit('/');",
            "  });",
            "",
            f"  it({js_string(tc.description)}, () => {{",
            *[f"    {s}" for s in steps],
            "",
            f"    {verify}",
            f"    {assertion}",
            "  });",
            "});",
        ]
    else:
        lines = [
            "import { test, expect } from '@playwright/test';",
            "",
            f"test.describe({js_string(tc.name)}, () => {{",
            f"  test({js_string(tc.description)}, async ({{ page }}) => {{",
            "    await page.goto('/');",
            *[f"    {s}" for s in steps],
            "",
            f"    {verify}",
            f"    {assertion}",
            "  });",
            "});",
        ]
    return "\n".join(lines) + "\n"


# ── URL templates ────────────────────────────────────────────────────────

def login_scenario(tc: TestCase) -> str:
    return first_match(LOGIN_SCENARIO_RULES, tc.name) or "success"


def _credentials(scenario: str, data: QuickTestDescriptor) -> Tuple[Optional[str], Optional[str]]:
    if scenario == "empty":
        return None, None
    if scenario == "invalid_username":
        return INVALID_USERNAME, data.password
    if scenario == "invalid_password":
        return data.username, INVALID_PASSWORD
    return data.username, data.password


def render_url(tc: TestCase, framework: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
    """Login spec that visits the quick-test URL with the given credentials."""
    _check_framework(framework)
    data = tc.test_data
    if data is None or not data.url:
        raise ValueError(f"Test case {tc.id} has no URL test data")

    scenario = login_scenario(tc)
    username, password = _credentials(scenario, data)
    if framework == "cypress":
        return _cypress_url(tc, data.url, username, password, scenario, timeout_ms)
    return _playwright_url(tc, data.url, username, password, scenario, timeout_ms)


def _cypress_url(tc, url, username, password, scenario, timeout_ms) -> str:
    lines = [
        f"describe({js_string(tc.name)}, () => {{",
        f"  it({js_string(tc.description)}, () => {{",
        "    cy.viewport(1280, 720);",
        "",
        "    // Navigate to the login page",
        f"    cy.visit({js_string(url)}, {{ timeout: {timeout_ms} }});",
        "    cy.get('#username').should('be.visible');",
    ]
    if username is not None:
        lines.append(f"    cy.get('#username').clear().type({js_string(username)}, {{ delay: 100 }});")
    if password is not None:
        lines.append(f"    cy.get('#password').clear().type({js_string(password)}, {{ delay: 100 }});")
    lines += [
        "",
        "    cy.get('button[type=\"submit\"]').should('be.visible').click();",
        "",
    ]
    if scenario == "success":
        lines.append("    cy.url().should('include', '/secure');")
    else:
        lines += [
            "    cy.url().should('not.include', '/secure');",
            "    cy.get('#flash').should('be.visible');",
        ]
    lines += ["  });", "});"]
    return "\n".join(lines) + "\n"


def _playwright_url(tc, url, username, password, scenario, timeout_ms) -> str:
    lines = [
        "import { test, expect } from '@playwright/test';",
        "",
        "test.use({",
        "  launchOptions: { slowMo: 500 },",
        "  viewport: { width: 1280, height: 720 },",
        "  video: 'on',",
        "  screenshot: 'on',",
        "});",
        "",
        f"test({js_string(tc.name)}, async ({{ page }}) => {{",
        f"  test.setTimeout({timeout_ms});",
        "",
        "  // Navigate to the login page",
        f"  await page.goto({js_string(url)});",
        "  await page.waitForLoadState('networkidle');",
        "",
    ]
    if username is not None:
        lines.append(f"  await page.locator('#username').fill({js_string(username)});")
    if password is not None:
        lines.append(f"  await page.locator('#password').fill({js_string(password)});")
    lines += [
        "  await page.locator('button[type=\"submit\"]').click();",
        "",
    ]
    if scenario == "success":
        lines.append("  await expect(page).toHaveURL(/.*secure/);")
    else:
        lines += [
            "  await expect(page).not.toHaveURL(/.*secure/);",
            "  await expect(page.locator('#flash')).toBeVisible();",
        ]
    lines.append("});")
    return "\n".join(lines) + "\n"
