from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, override_settings
from requests.exceptions import ConnectionError as RequestsConnectionError, ReadTimeout
from rest_framework.test import APIClient

URL = "/api/load-curve/analyze/"
POST = "loadcurve.infrastructure.ai_gateway.requests.post"

FLAT_DAY = "timestamp,value\n" + "\n".join(
    f"2024-01-01T{hour:02d}:00:00,10" for hour in range(24)
)


def gateway_response(status_code=200, content=None, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = "upstream says no" if not response.ok else ""
    if body is None:
        body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    response.json.return_value = body
    return response


@override_settings(
    AI_GATEWAY_API_KEY="test-key",
    AI_GATEWAY_URL="https://gateway.test/v1/chat/completions",
    AI_GATEWAY_MODEL="test-model",
    AI_GATEWAY_TIMEOUT=12.5,
)
class AnalyzeLoadCurveEndpointTest(SimpleTestCase):
    """
    Tests for POST /api/load-curve/analyze/

    The outbound gateway call is patched at the requests layer.
    """

    def setUp(self):
        self.client = APIClient()

    def analyze(self, content=FLAT_DAY):
        return self.client.post(URL, {"fileContent": content})

    @patch(POST)
    def test_successful_analysis(self, mock_post):
        mock_post.return_value = gateway_response(
            content='Here you go:\n{"recommended_mix": {"PV": 40, "Wind": 35, "Battery": 25}}'
        )

        response = self.analyze()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.data["result"],
            {"recommended_mix": {"PV": 40, "Wind": 35, "Battery": 25}},
        )
        self.assertEqual(response.data["analysis"]["pattern"], "mixed")
        self.assertEqual(response.data["analysis"]["dataPoints"], 24)

    @patch(POST)
    def test_gateway_request_shape(self, mock_post):
        mock_post.return_value = gateway_response(
            content='{"recommended_mix": {"PV": 40, "Wind": 35, "Battery": 25}}'
        )

        self.analyze()

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://gateway.test/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer test-key")
        self.assertEqual(kwargs["json"]["model"], "test-model")
        self.assertEqual(kwargs["json"]["messages"][0]["role"], "user")
        self.assertIn("Consumption Pattern: mixed", kwargs["json"]["messages"][0]["content"])
        self.assertEqual(kwargs["timeout"], 12.5)

    @patch(POST)
    def test_missing_file_content_returns_400(self, mock_post):
        response = self.client.post(URL, {})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "No file content provided")
        mock_post.assert_not_called()

    @patch(POST)
    def test_header_only_csv_is_rejected_before_calling_gateway(self, mock_post):
        response = self.analyze("timestamp,value\n")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "No data to analyze")
        mock_post.assert_not_called()

    @patch(POST)
    def test_rate_limit_is_passed_through(self, mock_post):
        mock_post.return_value = gateway_response(status_code=429)

        response = self.analyze()

        self.assertEqual(response.status_code, 429)
        self.assertEqual(mock_post.call_count, 1)

    @patch(POST)
    def test_payment_required_is_passed_through(self, mock_post):
        mock_post.return_value = gateway_response(status_code=402)

        response = self.analyze()

        self.assertEqual(response.status_code, 402)
        self.assertIn("Payment required", response.data["error"])

    @patch(POST)
    def test_other_upstream_failure_returns_500(self, mock_post):
        mock_post.return_value = gateway_response(status_code=503)

        response = self.analyze()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Failed to analyze data")

    @patch(POST)
    def test_unreachable_gateway_returns_500(self, mock_post):
        mock_post.side_effect = RequestsConnectionError("connection refused")

        response = self.analyze()

        self.assertEqual(response.status_code, 500)

    @patch(POST)
    def test_timeout_has_its_own_status(self, mock_post):
        mock_post.side_effect = ReadTimeout("too slow")

        response = self.analyze()

        self.assertEqual(response.status_code, 504)
        self.assertEqual(mock_post.call_count, 1)

    @patch(POST)
    def test_reply_without_json_returns_500(self, mock_post):
        mock_post.return_value = gateway_response(content="Mostly solar, I think.")

        response = self.analyze()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Invalid analysis format")

    @patch(POST)
    def test_empty_reply_returns_500(self, mock_post):
        mock_post.return_value = gateway_response(body={"choices": []})

        response = self.analyze()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "No analysis result received")

    @patch(POST)
    def test_oversized_mix_value_returns_500(self, mock_post):
        mock_post.return_value = gateway_response(
            content='{"recommended_mix": {"PV": 1' + "0" * 400 + ', "Wind": 30, "Battery": 20}}'
        )

        response = self.analyze()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Invalid analysis format")

    @override_settings(LOAD_CURVE_TIME_ZONE="Mars/Olympus")
    @patch(POST)
    def test_unknown_time_zone_returns_json_500(self, mock_post):
        response = self.analyze()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Load curve time zone is misconfigured")
        mock_post.assert_not_called()

    @override_settings(AI_GATEWAY_API_KEY="")
    @patch(POST)
    def test_missing_api_key_is_a_configuration_error(self, mock_post):
        response = self.analyze()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "API configuration error")
        mock_post.assert_not_called()

    def test_preflight_request_gets_empty_200(self):
        response = self.client.options(
            URL,
            HTTP_ORIGIN="https://app.example.com",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"")
