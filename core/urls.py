"""URL configuration for core views and the JSON API."""

from __future__ import annotations

from django.urls import path

from core import api_views, views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("upload/", views.upload, name="upload"),
    path("upload/clear/", views.clear_data, name="clear_data"),
    path("graphs/", views.graphs, name="graphs"),
    path("graphs/data.json", views.graphs_data, name="graphs_data"),
    path("graphs/export.csv", views.export_series_csv, name="export_series_csv"),
    path("api/status/", api_views.status, name="api_status"),
    path("api/auth/login/", api_views.login, name="api_login"),
    path("api/auth/logout/", api_views.logout, name="api_logout"),
    path("api/auth/session/", api_views.session, name="api_session"),
    path("api/upload/", api_views.upload, name="api_upload"),
    path("api/data/", api_views.data, name="api_data"),
    path("api/series/", api_views.series, name="api_series"),
]
