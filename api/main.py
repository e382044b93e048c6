# api/main.py
"""
Flask entrypoint for the on-demand build API.

The orchestrator is built once in main() and handed to create_app(); tests
pass their own orchestrator with a substitute runner.
"""

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from api.config import Settings, load_settings
from api.validation import validate_source_code
from builder.orchestrator import BuildOrchestrator
from builder.workspace import WorkspaceManager
from sandbox.provisioner import provision_image
from sandbox.runner import DockerRunner

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# room for the JSON envelope and escaping around a maximum-size source
REQUEST_OVERHEAD_BYTES = 64 * 1024


def configure_logging(settings: Settings) -> None:
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(
        level=logging.INFO if settings.is_production else logging.DEBUG,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _validation_error(message: str, status: int = 400):
    return jsonify({"success": False, "error": message, "errorType": "VALIDATION_ERROR"}), status


def _too_large():
    return _validation_error("Request body too large.", 413)


def create_app(orchestrator: BuildOrchestrator, settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings()
    app = Flask(__name__)
    # any origin may call the API from a browser
    CORS(app)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_source_size + REQUEST_OVERHEAD_BYTES

    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(_error):
        return _too_large()

    @app.route("/", methods=["GET"])
    def index():
        return "On-demand build service API server", 200, {"Content-Type": "text/plain; charset=utf-8"}

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"ok": True})

    @app.route("/api/build-artifact", methods=["POST"])
    def build_artifact():
        try:
            data = request.get_json(force=True)
        except RequestEntityTooLarge:
            return _too_large()
        except Exception:
            return _validation_error("Invalid JSON payload.")

        source_code = data.get("sourceCode") if isinstance(data, dict) else None
        ok, err = validate_source_code(source_code, max_size=settings.max_source_size)
        if not ok:
            logger.info("Rejected build request: %s", err)
            return _validation_error(err)

        logger.info("Build request received (%d characters)", len(source_code))
        try:
            started = time.monotonic()
            outcome = orchestrator.build_artifact(source_code)
            build_info = {
                "duration": int(round((time.monotonic() - started) * 1000)),
                "timestamp": _timestamp(),
            }
        except Exception as e:
            logger.exception("Unexpected error while building artifact")
            return jsonify({
                "success": False,
                "error": "Internal server error",
                "errorType": "SYSTEM_ERROR",
                "details": str(e),
            }), 500

        body = outcome.to_dict()
        body["buildInfo"] = build_info
        return jsonify(body), 200 if outcome.success else 400

    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings)

    if settings.skip_image_build:
        logger.warning("SKIP_IMAGE_BUILD is set; assuming %s already exists", settings.builder_image)
    else:
        ok, err = provision_image(settings.builder_image, settings.builder_context_dir, settings.docker_bin)
        if not ok:
            logger.error("Failed to build container image: %s", err)
            sys.exit(1)

    orchestrator = BuildOrchestrator(
        workspaces=WorkspaceManager(settings.build_tmp_root),
        runner=DockerRunner(settings.builder_image, docker_bin=settings.docker_bin),
    )
    app = create_app(orchestrator, settings)
    logger.info("Server listening on http://%s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    # Run with: python -m api.main  (from the project root)
    main()
