import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth.models import User
from django.db import transaction

from .exceptions import (
    AlreadyBlockedError,
    AlreadyUnmatchedError,
    NotFoundError,
    SelfInterestError,
    ValidationError,
)
from .models import Interest, InterestKind, Match
from .registry import registry as default_registry
from .safety import gate as default_gate
from .uow import PairUnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class InterestResult:
    interest: Interest
    match: Optional[Match] = None
    matched: bool = False


class InterestLedger:

    def __init__(self, registry=None, safety=None, unit_of_work=None):
        self.registry = registry or default_registry
        self.safety = safety or default_gate
        self.unit_of_work = unit_of_work

    def _uow(self):
        return self.unit_of_work or PairUnitOfWork()

    def record_interest(self, from_id, to_id, kind=InterestKind.LIKE):
        """
        Store from_id's interest in to_id and, in the same atomic unit, let
        the registry turn a reciprocated pair into a match. Sending the same
        interest twice changes nothing. `matched` is True only for the call
        that created the match.
        """
        if kind not in InterestKind.values:
            raise ValidationError(f'Unknown interest kind: {kind!r}.')
        if from_id == to_id:
            raise SelfInterestError()
        found = set(User.objects.filter(pk__in=[from_id, to_id]).values_list('pk', flat=True))
        if to_id not in found or from_id not in found:
            raise NotFoundError('User not found.')

        def write():
            if self.safety.is_blocked_between(from_id, to_id):
                raise AlreadyBlockedError()

            existing = self.registry.match_for_pair(from_id, to_id)
            if existing is not None:
                if not existing.is_active:
                    raise AlreadyUnmatchedError()
                interest = Interest.objects.filter(from_user_id=from_id, to_user_id=to_id).first()
                return InterestResult(interest=interest, match=existing, matched=False)

            interest, created = Interest.objects.get_or_create(
                from_user_id=from_id,
                to_user_id=to_id,
                defaults={'kind': kind},
            )
            if not created:
                return InterestResult(interest=interest)

            match, match_created = self.registry.try_create_match(from_id, to_id, kind)
            interest.refresh_from_db()
            return InterestResult(interest=interest, match=match, matched=match_created)

        result = self._uow().run(from_id, to_id, write)
        logger.info(
            'Interest %s -> %s (%s) recorded, matched=%s', from_id, to_id, kind, result.matched
        )
        return result

    def withdraw_interest(self, from_id, to_id):
        with transaction.atomic():
            interest = (
                Interest.objects.select_for_update()
                .filter(from_user_id=from_id, to_user_id=to_id, status=Interest.Status.PENDING)
                .first()
            )
            if interest is None:
                raise NotFoundError('No pending interest to withdraw.')
            interest.delete()
        logger.info('Interest %s -> %s withdrawn', from_id, to_id)


ledger = InterestLedger()
