"""
Notification views for the signed-in member.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from notifications.models import Notification
from notifications.serializers import NotificationSerializer
from notifications.services import mark_read


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_notifications_view(request):
    """
    GET /api/notifications/
    Returns the caller's notifications, newest first.
    """
    qs = Notification.objects.filter(user=request.user).order_by('-created_at')
    serializer = NotificationSerializer(qs[:100], many=True)
    return Response({
        'notifications': serializer.data,
        'unreadCount': qs.filter(is_read=False).count(),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_read_view(request, notification_id):
    """
    POST /api/notifications/{id}/read/
    """
    if not mark_read(request.user, notification_id):
        return Response({'detail': 'Notification not found', 'code': 'not_found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'detail': 'Marked as read'})
