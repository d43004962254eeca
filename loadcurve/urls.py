from django.urls import path
from .views import AnalyzeLoadCurveView

urlpatterns = [
    path("analyze/", AnalyzeLoadCurveView.as_view(), name="analyze-load-curve"),
]
