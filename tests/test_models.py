"""Test the data models."""

import json

import pytest

from prd_automation.models.test_model import AnalysisResult, ExecutionPlan, QuickTestDescriptor, TestCase


def make_case(**overrides):
    data = dict(id="tc-001", name="Login", description="d", steps=["a"], expected_result="ok")
    data.update(overrides)
    return TestCase(**data)


class TestStatus:

    def test_forward(self):
        tc = make_case()

        tc.advance("generated")
        tc.advance("running")
        tc.advance("failed")

        assert tc.status == "failed"

    def test_same_status_allowed(self):
        tc = make_case(status="generated")

        tc.advance("generated")

        assert tc.status == "generated"

    def test_regression_refused(self):
        tc = make_case(status="running")

        with pytest.raises(ValueError):
            tc.advance("pending")
        assert tc.status == "running"

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            make_case().advance("skipped")


class TestSerialization:

    def test_case_to_dict(self):
        tc = make_case(test_data=QuickTestDescriptor(url="https://x.test", username="u"))
        tc.code["cypress"] = "// cy"

        data = tc.to_dict()

        assert data["expectedResult"] == "ok"
        assert data["cypressCode"] == "// cy"
        assert "playwrightCode" not in data
        assert data["testData"] == {"url": "https://x.test", "username": "u"}

    def test_case_from_dict(self):
        tc = TestCase.from_dict({
            "name": "Login",
            "steps": ["a", 2],
            "status": "bogus",
            "playwrightCode": "// pw",
            "testData": {"url": "https://x.test"},
        }, index=7)

        assert tc.id == "tc-007"
        assert tc.steps == ["a", "2"]
        assert tc.status == "pending"
        assert tc.code == {"playwright": "// pw"}
        assert tc.test_data == QuickTestDescriptor(url="https://x.test")

    def test_descriptor_needs_url(self):
        assert QuickTestDescriptor.from_dict({"username": "u"}) is None
        assert QuickTestDescriptor.from_dict(None) is None

    def test_analysis_to_json(self):
        result = AnalysisResult(features=["Login"], test_cases=[make_case(), make_case(id="tc-002")])

        data = json.loads(result.to_json())

        assert data["totalTestCases"] == 2
        assert data["userStories"] == []
        assert [tc["id"] for tc in data["testCases"]] == ["tc-001", "tc-002"]

    def test_find(self):
        result = AnalysisResult(test_cases=[make_case(), make_case(id="tc-002")])

        assert result.find("tc-002").id == "tc-002"
        assert result.find("tc-999") is None

    def test_plan_to_dict(self):
        plan = ExecutionPlan(framework="cypress", files=["a.cy.js"], commands=["npx cypress open"])

        assert plan.to_dict() == {
            "framework": "cypress",
            "files": ["a.cy.js"],
            "suite_file": None,
            "commands": ["npx cypress open"],
            "pacing_seconds": 1.0,
        }

    @pytest.mark.parametrize("data", [
        {"url": 1},
        {"url": "example.com/login"},
        {"url": "ftp://example.com"},
        {"url": "https://example.com", "username": 5},
        {"url": "https://example.com", "password": ["p"]},
    ])
    def test_descriptor_rejects_malformed_data(self, data):
        assert QuickTestDescriptor.from_dict(data) is None
