from flask import Flask, request, jsonify
from flask_cors import CORS
from savings_engine import EngineConfig, QuoteProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the quoting UI calls from another origin)
CORS(app)

# Initialize the quote processor
processor = QuoteProcessor(EngineConfig.from_env())


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Processing Savings Calculator API",
        "version": "1.0",
        "endpoints": {
            "calculate": "/calculate [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/calculate", methods=["POST"])
def calculate():
    """
    Calculate a savings quote through the processing savings engine
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # Log request
        program_type = input_data.get('programType', 'Unknown')
        logger.info(f"Calculating quote: {program_type}")

        # Process through engine
        result = processor.process_from_dict(input_data)

        for warning in result["warnings"]:
            logger.warning(f"Quote warning ({program_type}): {warning}")

        logger.info(f"Quote calculated successfully: {program_type}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError, AttributeError) as e:
        # Malformed records (unknown program type, strict fee combo, ...)
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/process", methods=["POST"])
def process_legacy():
    """Legacy endpoint - redirects to /calculate"""
    return calculate()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
