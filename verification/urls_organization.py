"""
URLs for the tenant organization (/api/admin/organization)
"""
from django.urls import path
from . import views

urlpatterns = [
    path('organization', views.organization_view, name='organization'),
    path('organization/serial-counter/reset', views.serial_counter_reset_view, name='serial-counter-reset'),
]
