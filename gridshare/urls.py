from django.urls import include, path

urlpatterns = [
    path("api/", include("trading.urls")),
    path("api/load-curve/", include("loadcurve.urls")),
]
