"""
URLs for notifications app.
"""
from django.urls import path
from notifications.views import (
    my_notifications_view,
    notification_mark_read_view,
)

urlpatterns = [
    path('', my_notifications_view, name='notifications-list'),
    path('<int:notification_id>/read/', notification_mark_read_view, name='notification-mark-read'),
]
