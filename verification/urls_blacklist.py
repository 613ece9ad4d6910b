"""
URLs for the email blacklist (/api/admin/blacklist/)
"""
from django.urls import path
from . import views

urlpatterns = [
    path('', views.blacklist_view, name='blacklist'),
    path('remove', views.blacklist_remove_view, name='blacklist-remove'),
    path('bulk-remove', views.blacklist_bulk_remove_view, name='blacklist-bulk-remove'),
    path('stats', views.blacklist_stats_view, name='blacklist-stats'),
    path('check', views.blacklist_check_view, name='blacklist-check'),
]
