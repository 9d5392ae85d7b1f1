import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from .events import MATCH_CREATED, Event, get_event_sink
from .exceptions import NotFoundError
from .models import Conversation, Interest, InterestKind, Match
from .safety import gate as default_gate
from .stores import default_clock
from .uow import canonical_pair, lock_pair

logger = logging.getLogger(__name__)


class MatchRegistry:
    """
    Owner of Match records. A match only comes into existence inside
    try_create_match, under the pair lock, together with its conversation.
    """

    def __init__(self, clock=None, safety=None, sink=None):
        self.clock = clock or default_clock
        self.safety = safety or default_gate
        self._sink = sink

    @property
    def sink(self):
        return self._sink or get_event_sink()

    def match_for_pair(self, user_a, user_b):
        user1, user2 = canonical_pair(user_a, user_b)
        return Match.objects.filter(user1_id=user1, user2_id=user2).first()

    def get_match(self, match_id):
        try:
            return Match.objects.select_related('conversation').get(pk=match_id)
        except (Match.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'Match {match_id} not found.')

    @transaction.atomic
    def try_create_match(self, from_id, to_id, kind=InterestKind.LIKE):
        """
        Create the match for (from_id, to_id) if to_id already has a pending
        interest in from_id. Returns (match, created). A concurrent second
        writer gets the existing match back with created=False.
        """
        lock_pair(from_id, to_id)

        existing = self.match_for_pair(from_id, to_id)
        if existing is not None:
            return existing, False

        reciprocal = (
            Interest.objects.select_for_update()
            .filter(from_user_id=to_id, to_user_id=from_id, status=Interest.Status.PENDING)
            .first()
        )
        if reciprocal is None:
            return None, False

        origin = InterestKind.LIKE
        if InterestKind.SUPER_LIKE in (kind, reciprocal.kind):
            origin = InterestKind.SUPER_LIKE

        user1, user2 = canonical_pair(from_id, to_id)
        try:
            with transaction.atomic():
                match = Match.objects.create(user1_id=user1, user2_id=user2, origin=origin)
        except IntegrityError:
            return self.match_for_pair(from_id, to_id), False

        Conversation.objects.create(match=match)
        Interest.objects.filter(
            Q(from_user_id=from_id, to_user_id=to_id) | Q(from_user_id=to_id, to_user_id=from_id)
        ).update(status=Interest.Status.MATCHED)

        logger.info('Match %s created between users %s and %s (%s)', match.pk, user1, user2, origin)
        event = Event(MATCH_CREATED, {
            'match_id': match.pk,
            'user_ids': [user1, user2],
            'origin': origin,
        })
        transaction.on_commit(lambda: self.sink.emit(event))
        return match, True

    def unmatch(self, user_a, user_b):
        """Deactivate the pair's match. Already inactive matches are left alone."""
        with transaction.atomic():
            match = self.match_for_pair(user_a, user_b)
            if match is None:
                raise NotFoundError('These users are not matched.')
            match = Match.objects.select_for_update().get(pk=match.pk)
            if not match.is_active:
                return match
            match.is_active = False
            match.unmatched_at = self.clock.now()
            match.unmatched_by_id = user_a
            match.save(update_fields=['is_active', 'unmatched_at', 'unmatched_by'])
        logger.info('User %s unmatched from user %s (match %s)', user_a, user_b, match.pk)
        return match

    def list_matches(self, user_id, include_inactive=False):
        qs = Match.objects.filter(Q(user1_id=user_id) | Q(user2_id=user_id)).select_related('conversation')
        if not include_inactive:
            qs = qs.filter(is_active=True)
        hidden = self.safety.blocked_user_ids(user_id)
        return [m for m in qs.order_by('-created_at') if m.other_user_id(user_id) not in hidden]

    def matched_user_ids(self, user_id):
        """Every user ever matched with user_id, active or not."""
        pairs = Match.objects.filter(Q(user1_id=user_id) | Q(user2_id=user_id)).values_list('user1_id', 'user2_id')
        return {u2 if u1 == user_id else u1 for u1, u2 in pairs}


registry = MatchRegistry()
