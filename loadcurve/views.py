"""
API Layer — Load Curve Analysis Endpoint (Django REST Framework)

Thin controller: checks the upload is present, delegates to the use case
and maps each failure class to its own HTTP status:

- missing input → 400
- gateway payment required → 402, gateway rate limited → 429
- gateway timeout → 504
- configuration, unusable CSV, bad model reply, other gateway failures → 500
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from loadcurve.application.use_cases import recommend_investment_mix
from loadcurve.domain.exceptions import (
    AnalysisError,
    GatewayPaymentRequired,
    GatewayRateLimited,
    GatewayTimeout,
    RecommendationFormatError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = [
    (GatewayPaymentRequired, status.HTTP_402_PAYMENT_REQUIRED),
    (GatewayRateLimited, status.HTTP_429_TOO_MANY_REQUESTS),
    (GatewayTimeout, status.HTTP_504_GATEWAY_TIMEOUT),
]


class AnalyzeLoadCurveView(APIView):
    """
    POST /api/load-curve/analyze/
    """

    def post(self, request):
        file_content = request.data.get("fileContent") if isinstance(request.data, dict) else None
        if not file_content or not isinstance(file_content, str):
            return Response(
                {"error": "No file content provided"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            analysis, mix = recommend_investment_mix(file_content)
        except RecommendationFormatError as exc:
            logger.error("Unusable recommendation reply: %s | reply=%r", exc, exc.reply)
            return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except AnalysisError as exc:
            code = next(
                (code for error_type, code in STATUS_BY_ERROR if isinstance(exc, error_type)),
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
            logger.warning("Load curve analysis failed (%s): %s", code, exc)
            return Response({"error": str(exc)}, status=code)

        return Response(
            {
                "result": {"recommended_mix": mix.to_dict()},
                "analysis": analysis.to_dict(),
            },
            status=status.HTTP_200_OK,
        )
