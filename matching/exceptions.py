from rest_framework import status
from rest_framework.exceptions import APIException

"""
CORE ERRORS
"""


class MatchingError(APIException):
    """
    Base of every error raised by the matching core. Being an APIException,
    DRF turns it into a response with the right status code on its own.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Matching operation failed.'
    default_code = 'matching_error'
    retryable = False


class ValidationError(MatchingError):
    default_detail = 'Invalid input.'
    default_code = 'invalid'


class SelfInterestError(ValidationError):
    default_detail = 'You cannot express interest in yourself.'
    default_code = 'self_interest'


class NotFoundError(MatchingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class AlreadyBlockedError(MatchingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'A block exists between these users.'
    default_code = 'blocked'


class NotParticipantError(MatchingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not part of this match.'
    default_code = 'not_participant'


class MatchNotActiveError(MatchingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This match is no longer active.'
    default_code = 'match_not_active'


class AlreadyUnmatchedError(MatchingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'You already unmatched from this user.'
    default_code = 'already_unmatched'


class ContentionError(MatchingError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Too much concurrent activity, please retry.'
    default_code = 'contention'
    retryable = True
