"""
URLs for admin verification (/api/admin/verification/)
"""
from django.urls import path
from . import views

urlpatterns = [
    path('pending', views.pending_members_view, name='verification-pending'),
    path('stats', views.verification_stats_view, name='verification-stats'),
    path('users/<int:member_id>', views.member_detail_view, name='verification-member-detail'),
    path('users/<int:member_id>/verify', views.verify_member_view, name='verification-verify'),
    path('users/<int:member_id>/reject', views.reject_member_view, name='verification-reject'),
    path('users/<int:member_id>/unblock', views.unblock_member_view, name='verification-unblock'),
    path('bulk-verify', views.bulk_verify_view, name='verification-bulk-verify'),
]
