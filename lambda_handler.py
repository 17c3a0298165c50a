"""
AWS Lambda handler for the Quote Pricing Engine API.

Production entry point behind API Gateway; main.py serves the same routes
locally through Flask.
"""

import base64
import json
import logging

from quote_engine import QuoteProcessor
from quote_engine.config import ENVIRONMENT

logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Module level so the calculation cache survives between invocations
processor = QuoteProcessor()

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def _response(status_code: int, body) -> dict:
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(body)}


def _method_and_path(event) -> tuple[str, str]:
    """Read method and path from REST API (v1) or HTTP API (v2) events."""
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("path") or event.get("rawPath", "")
    return method, path


def _read_body(event):
    """Decoded JSON body, or None when the request has none."""
    body = event.get("body")
    if not isinstance(body, str):
        return body
    if not body:
        return None
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def handle_health(event):
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info(event):
    return _response(
        200,
        {
            "status": "ok",
            "message": "Quote Pricing Engine API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {"calculate_quote": "/calculate_quote [POST]", "health": "/health [GET]"},
        },
    )


def handle_calculate_quote(event):
    """Price a quote and allocate its deposits."""
    try:
        quote_request = _read_body(event)
        if not quote_request:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        category = quote_request.get("category", "Unknown") if isinstance(quote_request, dict) else "Unknown"
        logger.info(f"Pricing {category} quote")

        result = processor.process_from_dict(quote_request)
        logger.info(f"Priced {category} quote, gross {result['totals']['gross_total']['value']}")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"Quote body is not valid JSON: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Malformed payload structure
        logger.error(f"Quote rejected: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Details stay in the logs, never in the response
        logger.error(f"Quote pricing failed: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during processing", "status": "failed"})


ROUTES = {
    ("GET", "/health"): handle_health,
    ("GET", "/api"): handle_api_info,
    ("POST", "/calculate_quote"): handle_calculate_quote,
}


def lambda_handler(event, context):
    """Dispatch an API Gateway event to its route; OPTIONS answers CORS preflight."""
    method, path = _method_and_path(event)
    if method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    handler = ROUTES.get((method, path))
    if handler is None:
        return _response(404, {"error": "Not found", "path": path})
    return handler(event)
