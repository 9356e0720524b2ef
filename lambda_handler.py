"""
AWS Lambda handler for the Gig Ledger API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os

from gig_engine import AggregationEngine, GigFinancialCalculator
from gig_engine.export import ExportBuilder
from gig_engine.output import OutputBuilder
from gig_engine.reports import FinancialReportBuilder
from gig_engine.validators import InputValidator

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")
DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "EUR")

# Initialize components (reused across warm invocations)
validator = InputValidator()
calculator = GigFinancialCalculator()
engine = AggregationEngine()
reports = FinancialReportBuilder()
exports = ExportBuilder()
output = OutputBuilder()

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health, GET /api
    - POST /calculate_gig, /dashboard, /reports/financial, /exports
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif path in POST_ROUTES and http_method == "POST":
        return handle_post(event, POST_ROUTES[path])
    else:
        return {"statusCode": 404, "headers": CORS_HEADERS, "body": json.dumps({"error": "Not found", "path": path})}


def handle_health():
    """Health check endpoint."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": json.dumps({"status": "healthy", "environment": ENVIRONMENT}),
    }


def handle_api_info():
    """API information endpoint."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": json.dumps(
            {
                "status": "ok",
                "message": "Gig Ledger API",
                "version": "1.0",
                "environment": ENVIRONMENT,
                "currency": DEFAULT_CURRENCY,
                "runtime": "AWS Lambda",
                "endpoints": {route: f"{route} [POST]" for route in POST_ROUTES} | {"health": "/health [GET]"},
            }
        ),
    }


def calculate_gig(input_data):
    validator.validate(input_data)
    logger.info(f"Calculating gig: {input_data.get('eventName', 'Unknown')}")
    return output.calculation_to_dict(calculator.calculate_from_dict(input_data))


def dashboard(input_data):
    gigs = input_data.get("gigs", [])
    logger.info(f"Aggregating dashboard for {len(gigs)} gigs")
    return engine.aggregate_from_dicts(gigs, input_data.get("today"))


def financial_report(input_data):
    logger.info(f"Building financial report, period={input_data.get('period', 'all')}")
    return reports.build_from_dict(input_data)


def export(input_data):
    logger.info(f"Exporting {input_data.get('type') or 'gigs'}")
    return exports.build_from_dict(input_data)


POST_ROUTES = {
    "/calculate_gig": calculate_gig,
    "/dashboard": dashboard,
    "/reports/financial": financial_report,
    "/exports": export,
}


def _parse_body(event):
    body = event.get("body", "")
    if not isinstance(body, str):
        return body
    if not body:
        return None
    # Handle base64 encoded body (API Gateway)
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def handle_post(event, handler):
    """Parse the request body, run the route handler and map errors to status codes."""
    try:
        input_data = _parse_body(event)
        if not input_data:
            return {
                "statusCode": 400,
                "headers": CORS_HEADERS,
                "body": json.dumps({"error": "No input data provided", "status": "failed"}),
            }

        result = handler(input_data)

        if isinstance(result, str):
            headers = {**CORS_HEADERS, "Content-Type": "text/csv; charset=utf-8"}
            return {"statusCode": 200, "headers": headers, "body": result}
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": json.dumps(result)}

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return {
            "statusCode": 400,
            "headers": CORS_HEADERS,
            "body": json.dumps({"error": f"Invalid JSON: {str(e)}", "status": "failed"}),
        }

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors (missing fields, invalid types, unknown periods, etc.)
        logger.error(f"Validation error: {str(e)}")
        return {
            "statusCode": 400,
            "headers": CORS_HEADERS,
            "body": json.dumps({"error": f"Validation error: {str(e)}", "status": "validation_failed"}),
        }

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return {
            "statusCode": 500,
            "headers": CORS_HEADERS,
            "body": json.dumps({"error": "An unexpected error occurred during processing", "status": "failed"}),
        }
