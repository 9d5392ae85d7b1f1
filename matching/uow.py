import logging
import time

from django.db import OperationalError, transaction

from .conf import get_setting
from .exceptions import ContentionError
from .models import PairLock

logger = logging.getLogger(__name__)


def canonical_pair(user_a, user_b):
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


def lock_pair(user_a, user_b):
    """
    Take the row lock for the unordered pair. Must run inside an atomic block.
    get_or_create absorbs the IntegrityError of two first-time creators.
    """
    user1, user2 = canonical_pair(user_a, user_b)
    PairLock.objects.get_or_create(user1_id=user1, user2_id=user2)
    return PairLock.objects.select_for_update().get(user1_id=user1, user2_id=user2)


class PairUnitOfWork:
    """
    All-or-nothing section keyed by an unordered pair of users, retried a
    bounded number of times when the database reports contention.
    """

    def __init__(self, attempts=None, backoff=None):
        self.attempts = attempts if attempts is not None else get_setting('CONTENTION_RETRIES')
        self.backoff = backoff if backoff is not None else get_setting('CONTENTION_BACKOFF')

    def run(self, user_a, user_b, fn):
        last_error = None
        for attempt in range(1, self.attempts + 1):
            try:
                with transaction.atomic():
                    lock_pair(user_a, user_b)
                    return fn()
            except OperationalError as exc:
                last_error = exc
                logger.warning(
                    'Contention on pair (%s, %s), attempt %s/%s: %s',
                    user_a, user_b, attempt, self.attempts, exc
                )
                if attempt < self.attempts:
                    time.sleep(self.backoff * attempt)
        raise ContentionError() from last_error
