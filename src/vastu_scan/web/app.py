"""
Flask backend for the Vastu room scanner.
Generates two-stage scan reports and answers follow-up chat questions.
"""
from __future__ import annotations

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from vastu_scan.config import AppConfig, ConfigurationError, load_config
from vastu_scan.io.scan_reader import ScanPayloadError, parse_chat_history, parse_scan_data
from vastu_scan.llm_client.responses import LLMClient, UpstreamError, create_client
from vastu_scan.pipeline.chat import ChatHandler
from vastu_scan.pipeline.report_processor import ReportOrchestrator
from vastu_scan.utils.logging import configure_logging

MAX_BODY_BYTES = 50 * 1024 * 1024


def create_app(config: AppConfig | None = None, client: LLMClient | None = None) -> Flask:
    """Build the app. ``client`` is built lazily from ``config`` when not injected."""
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES
    CORS(app)

    settings = config or load_config()

    def get_client() -> LLMClient:
        # Raises ConfigurationError when no API key is configured.
        return client if client is not None else create_client(settings)

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(exc):
        app.logger.error("Configuration error: %s", exc)
        return jsonify({"error": str(exc)}), 503

    @app.errorhandler(ScanPayloadError)
    def handle_payload_error(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(UpstreamError)
    def handle_upstream_error(exc):
        app.logger.error("Error in %s: %s", request.path, exc)
        return jsonify({"error": str(exc), "status": exc.status_code}), 500

    @app.errorhandler(413)
    def handle_too_large(exc):
        return jsonify({"error": "Request body too large"}), 413

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return jsonify({"error": exc.description}), exc.code
        app.logger.exception("Error in %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 500

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({
            "provider": settings.llm_provider,
            "model": settings.model_name,
            "configured": bool(settings.api_key) or client is not None,
        })

    @app.route("/api/generateReport", methods=["POST"])
    def generate_report():
        """Run the visual assessment and elaboration for one scan and return the report text."""
        model_client = get_client()

        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "JSON body required"}), 400

        scan = parse_scan_data(body.get("scanData"))
        orchestrator = ReportOrchestrator(settings, model_client)
        text = orchestrator.generate_report(scan, deep_analysis=bool(body.get("isDeepAnalysis")))
        return jsonify({"text": text})

    @app.route("/api/handleChat", methods=["POST"])
    def handle_chat():
        """Answer one chat turn about a prior report."""
        model_client = get_client()

        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "JSON body required"}), 400

        history = parse_chat_history(body.get("chatHistory"))
        handler = ChatHandler(settings, model_client)
        text = handler.reply(history, body.get("chatContextSummary"))
        return jsonify({"text": text})

    return app


if __name__ == "__main__":
    configure_logging()
    _config = load_config()
    create_app(_config).run(host="0.0.0.0", port=_config.port)
