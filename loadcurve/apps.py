from django.apps import AppConfig


class LoadCurveConfig(AppConfig):
    name = "loadcurve"
