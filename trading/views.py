"""
API Layer — Marketplace Endpoints (Django REST Framework)

The views are thin controllers. Their responsibilities are limited to:

- Parsing the request payload into a validated TradeRequest
- Delegation to the application use case or read query
- Translation of domain exceptions into HTTP responses

Error mapping for trade settlement:

- Validation and business-rule failures → 400 {"error": ...}
- Exhausted optimistic-concurrency retries → 409
- Persistence failures → 500, logged with the traceback
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from trading.application.queries import get_portfolio, get_transaction_history, list_assets
from trading.application.use_cases import settle_trade
from trading.domain.exceptions import OwnershipConflict, TradeError
from trading.domain.settlement import parse_trade_request

logger = logging.getLogger(__name__)


class ExecuteTradeView(APIView):
    """
    POST /api/trades/execute/

    Settles one buy or sell. A rejected trade answers 400, a trade that keeps
    losing the ownership race answers 409, and a storage failure answers 500.
    """

    def post(self, request):
        try:
            trade = parse_trade_request(request.data)
            result = settle_trade(trade)
        except OwnershipConflict as exc:
            return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)
        except TradeError as exc:
            logger.warning("Trade rejected: %s", exc)
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception("Trade failed while writing to the database")
            return Response(
                {"error": "Failed to update ownership"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {"success": True, "newOwnership": result["new_ownership"]},
            status=status.HTTP_200_OK,
        )


class AssetListView(APIView):
    """GET /api/assets/"""

    def get(self, request):
        return Response(list_assets(), status=status.HTTP_200_OK)


class PortfolioView(APIView):
    """GET /api/users/<user_id>/portfolio/"""

    def get(self, request, user_id):
        return Response(get_portfolio(user_id), status=status.HTTP_200_OK)


class TransactionHistoryView(APIView):
    """GET /api/users/<user_id>/transactions/"""

    def get(self, request, user_id):
        return Response(get_transaction_history(user_id), status=status.HTTP_200_OK)
