from django.db.models import Q
from django.utils import timezone

from .exceptions import NotFoundError
from .models import Profile


class SystemClock:
    def now(self):
        return timezone.now()


class ProfileStore:
    """
    Read side of profile records. The feed and the safety gate only talk to
    profiles through this object so they can be exercised against any store
    that offers the same three calls.
    """

    def __init__(self, queryset=None):
        self.queryset = queryset if queryset is not None else Profile.objects.all()

    def get(self, user_id):
        try:
            return self.queryset.get(pk=user_id)
        except (Profile.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'Profile {user_id} not found.')

    def list_created_after(self, position, page_size):
        """
        Profiles strictly after `position` in (created_at desc, user_id desc)
        order. `position` is None for the start of the sequence, otherwise a
        (created_at, user_id) tuple.
        """
        qs = self.queryset.order_by('-created_at', '-pk')
        if position is not None:
            created_at, user_id = position
            qs = qs.filter(
                Q(created_at__lt=created_at) | Q(created_at=created_at, pk__lt=user_id)
            )
        return list(qs[:page_size])

    def is_visible(self, user_id, field):
        return self.get(user_id).is_field_visible(field)


default_clock = SystemClock()
default_store = ProfileStore()
