"""
Flask Web Application
----------------------
Routes:
  POST /analyze            → PRD / quick-test text → analysis + test cases
  POST /generate           → code for the current test cases
  POST /execute            → write test files and start the run in a terminal
  GET  /settings           → current configuration (no secrets)
  POST /settings/api-key   → set the Gemini API key for this process
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify, request

from prd_automation.agents.test_executor import CODE_SOURCE
from prd_automation.config import Settings, configure_logging
from prd_automation.exceptions import AutomationError, UnsupportedFrameworkError, WorkspaceUnavailableError
from prd_automation.models.test_model import AnalysisResult, CODEGEN_FRAMEWORKS, FRAMEWORKS
from prd_automation.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


def create_app(orchestrator: Optional[Orchestrator] = None) -> Flask:
    app = Flask(__name__)
    orchestrator = orchestrator or Orchestrator()
    session = {"analysis": None}  # replaced wholesale by every /analyze

    def current_analysis() -> Optional[AnalysisResult]:
        return session["analysis"]

    def json_body() -> dict:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    @app.errorhandler(UnsupportedFrameworkError)
    def unsupported_framework(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(WorkspaceUnavailableError)
    def workspace_unavailable(exc):
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(AutomationError)
    def automation_error(exc):
        logger.exception("Request failed")
        return jsonify({"error": str(exc)}), 500

    @app.route("/analyze", methods=["POST"])
    def analyze():
        data = json_body()
        prd = data.get("prd") or ""
        if not isinstance(prd, str):
            return jsonify({"error": "'prd' must be a string."}), 400
        prd = prd.strip()
        if not prd:
            return jsonify({"error": "Please enter content first."}), 400
        session["analysis"] = orchestrator.run(prd)
        return jsonify(session["analysis"].to_dict())

    @app.route("/generate", methods=["POST"])
    def generate():
        data = json_body()
        framework = data.get("framework", "cypress")
        if framework not in CODEGEN_FRAMEWORKS:
            raise UnsupportedFrameworkError(framework, CODEGEN_FRAMEWORKS)
        analysis = current_analysis()
        if analysis is None:
            return jsonify({"error": "No analysis yet. Run /analyze first."}), 404

        ids = data.get("ids")
        if ids is not None and not (isinstance(ids, list) and all(isinstance(i, str) for i in ids)):
            return jsonify({"error": "'ids' must be a list of test case ids."}), 400
        if ids:
            cases = [tc for tc in analysis.test_cases if tc.id in ids]
            generated = orchestrator.generate_code(cases, framework, only_missing=False)
        else:
            cases = analysis.test_cases
            generated = orchestrator.generate_code(cases, framework)
        return jsonify({
            "generated": generated,
            "testCases": [tc.to_dict() for tc in cases],
        })

    @app.route("/execute", methods=["POST"])
    def execute():
        data = json_body()
        framework = data.get("framework", "playwright")
        if framework not in FRAMEWORKS:
            raise UnsupportedFrameworkError(framework, FRAMEWORKS)
        analysis = current_analysis()
        if analysis is None or not analysis.test_cases:
            return jsonify({"error": "No tests to run."}), 404

        source = CODE_SOURCE[framework]
        with_code = [tc for tc in analysis.test_cases if source in tc.code]
        if not with_code:
            return jsonify({"error": "Please generate test code first."}), 400

        plan = orchestrator.execute(
            with_code, framework,
            headed=bool(data.get("headed", False)),
            browser=data.get("browser"),
        )
        return jsonify(plan.to_dict())

    @app.route("/settings", methods=["GET"])
    def settings():
        return jsonify(orchestrator.settings.to_dict())

    @app.route("/settings/api-key", methods=["POST"])
    def set_api_key():
        data = json_body()
        api_key = data.get("api_key")
        if api_key is not None and not isinstance(api_key, str):
            return jsonify({"error": "'api_key' must be a string."}), 400
        orchestrator.settings.set_api_key(api_key)
        return jsonify(orchestrator.settings.to_dict())

    return app


def main() -> None:
    settings = Settings()
    configure_logging(settings.debug)
    app = create_app(Orchestrator(settings))
    port = int(os.environ.get("PORT", 10000))
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()
