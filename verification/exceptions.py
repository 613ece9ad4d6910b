"""
Verification workflow errors. Each carries a stable code for API clients:
409 = stale view of member state, 403 = authorization, 400 = bad request.
"""
from rest_framework import status
from rest_framework.exceptions import APIException

from core.tenancy import OrganizationNotConfigured  # noqa: F401  (re-exported)


class MemberNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'User not found.'
    default_code = 'member_not_found'


class AlreadyVerified(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User is already verified.'
    default_code = 'already_verified'


class NotPending(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User is not pending verification.'
    default_code = 'not_pending'


class AlreadyRejected(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User is already rejected.'
    default_code = 'already_rejected'


class CannotRejectVerified(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A verified user cannot be rejected.'
    default_code = 'cannot_reject_verified'


class NotRejected(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User is not rejected/blacklisted.'
    default_code = 'not_rejected'


class InsufficientPrivilege(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Your role does not permit this action.'
    default_code = 'insufficient_privilege'


class SerialGenerationFailed(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Failed to generate serial ID.'
    default_code = 'serial_generation_failed'


class InvalidConfirmationToken(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Confirmation token does not match; the serial counter was not changed.'
    default_code = 'invalid_confirmation_token'


class BulkLimitExceeded(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Too many users in one bulk request.'
    default_code = 'bulk_limit_exceeded'
