"""Standalone Flask server for sold-comps lookups.

Run with:
    python serve.py
    # or
    FLASK_PORT=8080 python serve.py

Endpoints:
    GET /api/sold?q=<query>            - listings + market stats for a query
    GET /.netlify/functions/ebaySales  - same handler on the legacy function route
    GET /api/health                    - health check
"""
from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Optional

try:
    from flask import Flask, Response, jsonify, request
except ImportError:
    raise SystemExit(
        "Flask is required for the standalone server.\n"
        "Install it with: pip install flask"
    )

from soldcomps import get_logger
from soldcomps.config import Settings, load_dotenv
from soldcomps.pipeline import InvalidQueryError, SoldCompsService

ROOT_DIR = Path(__file__).parent
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Methods": "*",
}

LOGGER = get_logger()
load_dotenv(ROOT_DIR / ".env")

app = Flask(__name__)
_SERVICE: Optional[SoldCompsService] = None
_SERVICE_LOCK = threading.Lock()


def get_service() -> SoldCompsService:
    global _SERVICE
    with _SERVICE_LOCK:
        if _SERVICE is None:
            _SERVICE = SoldCompsService(Settings.from_env())
        return _SERVICE


@app.after_request
def _add_cors_headers(response: Response) -> Response:
    response.headers.update(CORS_HEADERS)
    return response


@app.route("/api/sold", methods=["GET", "OPTIONS"])
@app.route("/.netlify/functions/ebaySales", methods=["GET", "OPTIONS"])
def api_sold():
    if request.method == "OPTIONS":
        LOGGER.info("Handling preflight OPTIONS request")
        return Response("Preflight check successful", status=200, mimetype="text/plain")
    query = request.args.get("q")
    try:
        payload = get_service().lookup(query)
    except InvalidQueryError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:
        LOGGER.exception("Error in sold comps handler for query=%r", query)
        return jsonify({"error": "Internal Server Error", "message": str(exc)}), 500
    return jsonify(payload)


@app.route("/api/health")
def api_health():
    service = get_service()
    return jsonify({
        "status": "ok",
        "cache_entries": len(service.cache),
        "fallback_configured": bool(service.settings.serpapi_api_key),
    })


if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "127.0.0.1").strip() or "127.0.0.1"
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_DEBUG", "").lower() in ("1", "true")
    print(f"soldcomps server running on http://{host}:{port}")
    print("Endpoints: /api/sold?q=..., /.netlify/functions/ebaySales?q=..., /api/health")
    app.run(host=host, port=port, debug=debug, threaded=True)
