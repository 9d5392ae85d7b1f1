import logging
import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from django.core import signing
from django.db.models import Q
from django.utils.dateparse import parse_datetime

from .conf import get_setting
from .exceptions import NotFoundError, ValidationError
from .models import Pass, Profile
from .registry import registry as default_registry
from .safety import gate as default_gate
from .stores import default_clock, default_store

logger = logging.getLogger(__name__)

ALL = 'all'
CURSOR_SALT = 'matching.feed.cursor'
EARTH_RADIUS_KM = 6371.0


def _parse_set(value, name):
    if value is None or value == ALL:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValidationError(f'{name} must be "all" or a list.')
    values = frozenset(str(v).strip() for v in value if str(v).strip())
    return values or None


def _parse_int(value, name):
    if value is None or value == '' or value == ALL:
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer.')
    if number < 0:
        raise ValidationError(f'{name} must be positive.')
    return number


@dataclass(frozen=True)
class Preferences:
    """
    Candidate filters. None on any field is the "all" wildcard.
    """
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    gender_identities: Optional[frozenset] = None
    sexual_orientations: Optional[frozenset] = None
    max_distance_km: Optional[int] = None

    def __post_init__(self):
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise ValidationError('min_age cannot be greater than max_age.')

    @classmethod
    def from_data(cls, data):
        data = data or {}
        return cls(
            min_age=_parse_int(data.get('min_age'), 'min_age'),
            max_age=_parse_int(data.get('max_age'), 'max_age'),
            gender_identities=_parse_set(data.get('gender_identities'), 'gender_identities'),
            sexual_orientations=_parse_set(data.get('sexual_orientations'), 'sexual_orientations'),
            max_distance_km=_parse_int(data.get('max_distance_km'), 'max_distance_km'),
        )

    @classmethod
    def from_profile(cls, profile):
        return cls(
            min_age=profile.pref_min_age,
            max_age=profile.pref_max_age,
            gender_identities=_parse_set(profile.pref_gender_identities or None, 'gender_identities'),
            sexual_orientations=_parse_set(profile.pref_sexual_orientations or None, 'sexual_orientations'),
            max_distance_km=profile.pref_max_distance_km,
        )

    def as_data(self):
        return {
            'min_age': self.min_age,
            'max_age': self.max_age,
            'gender_identities': sorted(self.gender_identities) if self.gender_identities else ALL,
            'sexual_orientations': sorted(self.sexual_orientations) if self.sexual_orientations else ALL,
            'max_distance_km': self.max_distance_km,
        }

    def accepts(self, viewer, candidate):
        if self.min_age is not None or self.max_age is not None:
            if candidate.age is None:
                return False
            if self.min_age is not None and candidate.age < self.min_age:
                return False
            if self.max_age is not None and candidate.age > self.max_age:
                return False
        if self.gender_identities is not None and candidate.gender_identity not in self.gender_identities:
            return False
        if self.sexual_orientations is not None and candidate.sexual_orientation not in self.sexual_orientations:
            return False
        if self.max_distance_km is not None and _has_coordinates(viewer):
            if not _has_coordinates(candidate):
                return False
            if distance_km(viewer, candidate) > self.max_distance_km:
                return False
        return True


def _has_coordinates(profile):
    return profile.location_lat is not None and profile.location_lng is not None


def distance_km(a, b):
    lat1, lng1, lat2, lng2 = map(math.radians, (a.location_lat, a.location_lng, b.location_lat, b.location_lng))
    h = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def encode_cursor(profile):
    return signing.dumps({'ts': profile.created_at.isoformat(), 'id': profile.pk}, salt=CURSOR_SALT)


def decode_cursor(cursor):
    if not cursor:
        return None
    try:
        data = signing.loads(cursor, salt=CURSOR_SALT)
        created_at = parse_datetime(data['ts'])
        user_id = int(data['id'])
    except (signing.BadSignature, KeyError, TypeError, ValueError):
        raise ValidationError('Invalid cursor.')
    if created_at is None:
        raise ValidationError('Invalid cursor.')
    return created_at, user_id


@dataclass
class FeedPage:
    results: List[dict] = field(default_factory=list)
    next_cursor: Optional[str] = None


class CandidateFeed:

    def __init__(self, store=None, safety=None, registry=None, clock=None):
        self.store = store or default_store
        self.safety = safety or default_gate
        self.registry = registry or default_registry
        self.clock = clock or default_clock

    def passed_user_ids(self, user_id):
        now = self.clock.now()
        return set(
            Pass.objects.filter(user_id=user_id)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
            .values_list('passed_on_id', flat=True)
        )

    def _excluded(self, viewer_id):
        excluded = {viewer_id}
        excluded |= self.safety.blocked_user_ids(viewer_id)
        excluded |= self.registry.matched_user_ids(viewer_id)
        excluded |= self.passed_user_ids(viewer_id)
        return excluded

    def iter_candidates(self, viewer_id, preferences=None, cursor=None, batch_size=None):
        """
        Lazy, forward-only walk over eligible profiles, yielding
        (profile, position) pairs. Exclusions come first (self, blocks,
        matches, passes, hidden profiles), then the preference filters.
        """
        viewer = self.store.get(viewer_id)
        if preferences is None:
            preferences = Preferences.from_profile(viewer)
        batch_size = batch_size or get_setting('FEED_BATCH_SIZE')
        position = decode_cursor(cursor)
        excluded = self._excluded(viewer_id)

        while True:
            batch = self.store.list_created_after(position, batch_size)
            for profile in batch:
                position = (profile.created_at, profile.pk)
                if profile.pk in excluded or not profile.profile_visible:
                    continue
                if not preferences.accepts(viewer, profile):
                    continue
                yield profile, position
            if len(batch) < batch_size:
                return

    def next_page(self, viewer_id, preferences=None, cursor=None, page_size=None):
        page_size = page_size if page_size is not None else get_setting('FEED_DEFAULT_PAGE_SIZE')
        max_size = get_setting('FEED_MAX_PAGE_SIZE')
        if page_size < 1 or page_size > max_size:
            raise ValidationError(f'page_size must be between 1 and {max_size}.')

        page = FeedPage()
        last = None
        candidates = self.iter_candidates(viewer_id, preferences, cursor, batch_size=max(page_size, get_setting('FEED_BATCH_SIZE')))
        try:
            for profile, _ in candidates:
                page.results.append(profile.project())
                last = profile
                if len(page.results) == page_size:
                    break
        finally:
            candidates.close()

        if len(page.results) == page_size:
            page.next_cursor = encode_cursor(last)
        return page

    def record_pass(self, viewer_id, target_id):
        if viewer_id == target_id:
            raise ValidationError('You cannot pass on yourself.')
        if not Profile.objects.filter(pk=target_id).exists():
            raise NotFoundError(f'Profile {target_id} not found.')
        ttl_days = get_setting('PASS_TTL_DAYS')
        expires_at = self.clock.now() + timedelta(days=ttl_days) if ttl_days else None
        passed, _ = Pass.objects.update_or_create(
            user_id=viewer_id,
            passed_on_id=target_id,
            defaults={'expires_at': expires_at},
        )
        return passed

    def save_preferences(self, user_id, preferences):
        profile = self.store.get(user_id)
        profile.pref_min_age = preferences.min_age
        profile.pref_max_age = preferences.max_age
        profile.pref_gender_identities = sorted(preferences.gender_identities or [])
        profile.pref_sexual_orientations = sorted(preferences.sexual_orientations or [])
        profile.pref_max_distance_km = preferences.max_distance_km
        profile.save(update_fields=[
            'pref_min_age', 'pref_max_age', 'pref_gender_identities',
            'pref_sexual_orientations', 'pref_max_distance_km',
        ])
        return profile


feed = CandidateFeed()
