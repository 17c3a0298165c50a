"""
Flask development server for the Quote Pricing Engine.

Serves the same routes as lambda_handler.py for local work against the
quote form.
"""

import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS

from quote_engine import QuoteProcessor

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# The quote form is served from a different origin
CORS(app)

processor = QuoteProcessor()


def _error(message: str, status: str, status_code: int):
    return jsonify({"error": message, "status": status}), status_code


@app.route("/api", methods=["GET"])
def api_info():
    return jsonify({
        "status": "ok",
        "message": "Quote Pricing Engine API",
        "version": "1.0",
        "endpoints": {
            "calculate_quote": "/calculate_quote [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "healthy"}), 200


@app.route("/calculate_quote", methods=["POST"])
def calculate_quote():
    """Price a quote and allocate its deposits."""
    quote_request = request.get_json(force=True, silent=True)
    if not quote_request:
        return _error("No input data provided", "failed", 400)

    category = quote_request.get("category", "Unknown") if isinstance(quote_request, dict) else "Unknown"
    logger.info(f"Pricing {category} quote")

    try:
        result = processor.process_from_dict(quote_request)
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Quote rejected: {str(e)}")
        return _error(str(e), "validation_failed", 400)
    except Exception as e:
        logger.error(f"Quote pricing failed: {str(e)}", exc_info=True)
        return _error(str(e), "failed", 500)

    logger.info(f"Priced {category} quote")
    return jsonify(result), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
