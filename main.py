from flask import Flask, request, jsonify, make_response
from flask_cors import CORS
from gig_engine import AggregationEngine, GigFinancialCalculator
from gig_engine.export import ExportBuilder
from gig_engine.output import OutputBuilder
from gig_engine.reports import FinancialReportBuilder
from gig_engine.validators import InputValidator
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")
DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "EUR")

app = Flask(__name__)

# Enable CORS for all routes (the dashboard front-end calls from another origin)
CORS(app)

# Initialize the engine components
validator = InputValidator()
calculator = GigFinancialCalculator()
engine = AggregationEngine()
reports = FinancialReportBuilder()
exports = ExportBuilder()
output = OutputBuilder()


NO_INPUT = {"error": "No input data provided", "status": "failed"}


def _failure(e: Exception):
    if isinstance(e, (ValueError, KeyError, TypeError)):
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": str(e), "status": "validation_failed"}), 400
    logger.error(f"Processing error: {str(e)}", exc_info=True)
    return jsonify({"error": "An unexpected error occurred during processing", "status": "failed"}), 500


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Gig Ledger API",
        "version": "1.0",
        "environment": ENVIRONMENT,
        "currency": DEFAULT_CURRENCY,
        "endpoints": {
            "calculate_gig": "/calculate_gig [POST]",
            "dashboard": "/dashboard [POST]",
            "financial_report": "/reports/financial [POST]",
            "exports": "/exports [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/calculate_gig", methods=["POST"])
def calculate_gig():
    """
    Validate one gig and return its earnings breakdown
    """
    try:
        input_data = request.get_json(force=True, silent=True)
        if not input_data:
            return jsonify(NO_INPUT), 400

        validator.validate(input_data)

        event_name = input_data.get("eventName", "Unknown")
        logger.info(f"Calculating gig: {event_name}")

        result = calculator.calculate_from_dict(input_data)
        return jsonify(output.calculation_to_dict(result)), 200

    except Exception as e:
        return _failure(e)


@app.route("/dashboard", methods=["POST"])
def dashboard():
    """
    Aggregate a gig list into the dashboard summary
    """
    try:
        input_data = request.get_json(force=True, silent=True)
        if not input_data:
            return jsonify(NO_INPUT), 400

        gigs = input_data.get("gigs", [])
        logger.info(f"Aggregating dashboard for {len(gigs)} gigs")

        result = engine.aggregate_from_dicts(gigs, input_data.get("today"))
        return jsonify(result), 200

    except Exception as e:
        return _failure(e)


@app.route("/reports/financial", methods=["POST"])
def financial_report():
    """Financial report over a period or date range"""
    try:
        input_data = request.get_json(force=True, silent=True)
        if not input_data:
            return jsonify(NO_INPUT), 400

        logger.info(f"Building financial report, period={input_data.get('period', 'all')}")
        return jsonify(reports.build_from_dict(input_data)), 200

    except Exception as e:
        return _failure(e)


@app.route("/exports", methods=["POST"])
def export():
    """CSV or JSON export of the given gigs"""
    try:
        input_data = request.get_json(force=True, silent=True)
        if not input_data:
            return jsonify(NO_INPUT), 400

        export_type = input_data.get("type") or "gigs"
        logger.info(f"Exporting {export_type}")

        result = exports.build_from_dict(input_data)
        if isinstance(result, dict):
            return jsonify(result), 200

        response = make_response(result)
        response.headers["Content-Type"] = "text/csv; charset=utf-8"
        response.headers["Content-Disposition"] = f'attachment; filename="{export_type}.csv"'
        response.headers["Cache-Control"] = "no-store"
        return response

    except Exception as e:
        return _failure(e)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
