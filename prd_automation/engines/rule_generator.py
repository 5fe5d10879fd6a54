"""
Rule-Based Test Case Generator (fallback engine)
-------------------------------------------------
Produces canned test cases without an LLM:

  - URL mode      → four login cases for a quick-test descriptor
  - Keyword mode  → login / cart / search cases picked by keyword, or one
                    generic case when nothing matches

Ids are fixed literals, unique only within one AnalysisResult.
"""

from typing import Callable, List, Tuple

from prd_automation.models.test_model import AnalysisResult, QuickTestDescriptor, TestCase


def _login_cases() -> List[TestCase]:
    return [
        TestCase(
            id="login-001",
            name="Successful Login",
            description="User can login with valid credentials",
            steps=["Navigate to login page",
                   "Enter valid email address",
                   "Enter valid password",
                   "Click login button"],
            expected_result="User is redirected to dashboard",
        ),
        TestCase(
            id="login-002",
            name="Invalid Credentials",
            description="System shows error for invalid login",
            steps=["Navigate to login page",
                   "Enter invalid email or password",
                   "Click login button"],
            expected_result="Error message is displayed",
        ),
    ]


def _cart_cases() -> List[TestCase]:
    return [
        TestCase(
            id="cart-001",
            name="Add to Cart",
            description="User can add products to cart",
            steps=["Navigate to product page",
                   "Click add to cart button",
                   "Verify cart notification"],
            expected_result="Product is added to cart",
        ),
        TestCase(
            id="cart-002",
            name="Remove from Cart",
            description="User can remove items from cart",
            steps=["Navigate to cart page",
                   "Click remove button on item",
                   "Confirm removal"],
            expected_result="Item is removed from cart",
        ),
    ]


def _search_cases() -> List[TestCase]:
    return [
        TestCase(
            id="search-001",
            name="Search Functionality",
            description="User can search for items",
            steps=["Navigate to homepage",
                   "Enter search term",
                   "Click search button"],
            expected_result="Search results are displayed",
        ),
    ]


def _generic_case() -> TestCase:
    return TestCase(
        id="generic-001",
        name="Basic Functionality Test",
        description="Verify basic system functionality",
        steps=["Navigate to application",
               "Perform primary action",
               "Verify expected behavior"],
        expected_result="System works as expected",
    )


class RuleGenerator:

    # Checked in order; every matching domain contributes its cases.
    DOMAIN_RULES: List[Tuple[str, Callable[[str], bool], Callable[[], List[TestCase]]]] = [
        ("login",  lambda pl: "login" in pl,                     _login_cases),
        ("cart",   lambda pl: "cart" in pl or "shopping" in pl,  _cart_cases),
        ("search", lambda pl: "search" in pl,                    _search_cases),
    ]

    QUICK_TEST_CRITERIA = [
        "Valid credentials allow successful login",
        "Invalid credentials show appropriate error messages",
        "Empty fields show validation messages",
    ]

    # ── Keyword mode ──────────────────────────────────────────────────────

    def from_keywords(self, prd: str) -> List[TestCase]:
        pl = prd.lower()
        cases: List[TestCase] = []
        for _domain, matches, build in self.DOMAIN_RULES:
            if matches(pl):
                cases.extend(build())
        if not cases:
            cases.append(_generic_case())
        return cases

    # ── URL mode ──────────────────────────────────────────────────────────

    def from_quick_test(self, data: QuickTestDescriptor) -> List[TestCase]:
        url, username, password = data.url, data.username, data.password
        return [
            TestCase(
                id="login-001",
                name="Successful Login with Valid Credentials",
                description=f"Verify user can login to {url} with valid credentials",
                steps=[f"Navigate to {url}",
                       f"Enter username: {username}",
                       f"Enter password: {password}",
                       "Click login/submit button",
                       "Verify successful login"],
                expected_result="User is successfully logged in and redirected to dashboard/home page",
                test_data=data,
            ),
            TestCase(
                id="login-002",
                name="Invalid Username Test",
                description="Verify system shows error for invalid username",
                steps=[f"Navigate to {url}",
                       "Enter invalid username",
                       f"Enter password: {password}",
                       "Click login button"],
                expected_result="Error message is displayed indicating invalid username",
                test_data=data,
            ),
            TestCase(
                id="login-003",
                name="Invalid Password Test",
                description="Verify system shows error for invalid password",
                steps=[f"Navigate to {url}",
                       f"Enter username: {username}",
                       "Enter invalid password",
                       "Click login button"],
                expected_result="Error message is displayed indicating invalid password",
                test_data=data,
            ),
            TestCase(
                id="login-004",
                name="Empty Fields Validation",
                description="Verify validation for empty username and password fields",
                steps=[f"Navigate to {url}",
                       "Leave username and password fields empty",
                       "Click login button"],
                expected_result="Validation messages appear for required fields",
                test_data=data,
            ),
        ]

    def quick_test_analysis(self, data: QuickTestDescriptor) -> AnalysisResult:
        return AnalysisResult(
            features=["Login Authentication"],
            user_stories=[f"As a user, I want to login to {data.url}"],
            acceptance_criteria=list(self.QUICK_TEST_CRITERIA),
            test_cases=self.from_quick_test(data),
        )
