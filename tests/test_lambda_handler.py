"""Tests for AWS Lambda handler."""

import base64
import json

from lambda_handler import lambda_handler

QUOTE_PAYLOAD = {
    "programType": "DUAL_PRICING",
    "businessType": "RESTAURANT",
    "monthlyCardVolume": 100000,
    "currentRatePercent": 3,
    "interchangeCostPercent": 2.5,
    "priceAdjustmentPercent": 4,
}


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        event = {"httpMethod": "GET", "path": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "healthy"

    def test_api_info(self):
        """GET /api returns API information."""
        event = {"httpMethod": "GET", "path": "/api"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "ok"
        assert "endpoints" in body

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/calculate"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        event = {"httpMethod": "GET", "path": "/unknown"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404

    def test_calculate_success(self):
        """POST /calculate returns the quote breakdown."""
        event = {"httpMethod": "POST", "path": "/calculate", "body": json.dumps(QUOTE_PAYLOAD)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert "calculations" in body
        assert body["savings"]["total_net_gain_monthly"] == 2996.0

    def test_calculate_very_large_volume(self):
        """Out-of-range volumes still produce a quote."""
        payload = dict(QUOTE_PAYLOAD, monthlyCardVolume="1e30")
        event = {"httpMethod": "POST", "path": "/calculate", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_calculate_base64_body(self):
        """API Gateway may base64-encode the body."""
        encoded = base64.b64encode(json.dumps(QUOTE_PAYLOAD).encode("utf-8")).decode("ascii")
        event = {"httpMethod": "POST", "path": "/calculate", "body": encoded, "isBase64Encoded": True}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_calculate_dict_body(self):
        """Direct invocations may pass the body already parsed."""
        event = {"httpMethod": "POST", "path": "/calculate", "body": QUOTE_PAYLOAD}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_calculate_empty_body(self):
        """POST /calculate with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/calculate", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_calculate_invalid_json(self):
        """POST /calculate with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/calculate", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["error"].startswith("Invalid JSON")

    def test_calculate_unknown_program(self):
        """An unknown program type returns 400."""
        payload = dict(QUOTE_PAYLOAD, programType="SURCHARGE")
        event = {"httpMethod": "POST", "path": "/calculate", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_calculate_non_object_body(self):
        """A JSON array is not a quote."""
        event = {"httpMethod": "POST", "path": "/calculate", "body": "[1, 2]"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
