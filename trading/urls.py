from django.urls import path
from .views import AssetListView, ExecuteTradeView, PortfolioView, TransactionHistoryView

urlpatterns = [
    path("trades/execute/", ExecuteTradeView.as_view(), name="execute-trade"),
    path("assets/", AssetListView.as_view(), name="asset-list"),
    path("users/<uuid:user_id>/portfolio/", PortfolioView.as_view(), name="user-portfolio"),
    path("users/<uuid:user_id>/transactions/", TransactionHistoryView.as_view(), name="user-transactions"),
]
