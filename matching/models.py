from django.db import models
from django.contrib.auth.models import User

"""
PROFILES
"""

VISIBILITY_FLAGS = {
    'age': 'age_visible',
    'location': 'location_visible',
    'gender_identity': 'gender_identity_visible',
    'sexual_orientation': 'sexual_orientation_visible',
    'pronouns': 'pronouns_visible',
}


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True)
    display_name = models.CharField(max_length=100)
    bio = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    location = models.CharField(max_length=120, blank=True)
    location_lat = models.FloatField(null=True, blank=True)
    location_lng = models.FloatField(null=True, blank=True)
    gender_identity = models.CharField(max_length=60, blank=True)
    sexual_orientation = models.CharField(max_length=60, blank=True)
    pronouns = models.CharField(max_length=40, blank=True)

    profile_visible = models.BooleanField(default=True)
    age_visible = models.BooleanField(default=True)
    location_visible = models.BooleanField(default=True)
    gender_identity_visible = models.BooleanField(default=True)
    sexual_orientation_visible = models.BooleanField(default=True)
    pronouns_visible = models.BooleanField(default=True)

    # Stored matching preferences; null / empty means "all".
    pref_min_age = models.PositiveSmallIntegerField(null=True, blank=True)
    pref_max_age = models.PositiveSmallIntegerField(null=True, blank=True)
    pref_gender_identities = models.JSONField(default=list, blank=True)
    pref_sexual_orientations = models.JSONField(default=list, blank=True)
    pref_max_distance_km = models.PositiveIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at', '-pk']

    def __str__(self):
        return self.display_name or self.user.username

    def is_field_visible(self, field):
        flag = VISIBILITY_FLAGS.get(field)
        if flag is None:
            return True
        return getattr(self, flag)

    def project(self):
        """
        ProfileView: what other users may see. Hidden fields are left out of
        the dict entirely instead of being sent as null.
        """
        view = {
            'user_id': self.user_id,
            'display_name': self.display_name,
            'bio': self.bio,
            'tags': list(self.tags or []),
        }
        for field in VISIBILITY_FLAGS:
            if self.is_field_visible(field):
                view[field] = getattr(self, field)
        return view


"""
INTERESTS AND MATCHES
"""

class InterestKind(models.TextChoices):
    LIKE = 'like', 'Like'
    SUPER_LIKE = 'super_like', 'Super like'


class Interest(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        MATCHED = 'matched', 'Matched'

    from_user = models.ForeignKey(User, related_name='sent_interests', on_delete=models.CASCADE)
    to_user = models.ForeignKey(User, related_name='received_interests', on_delete=models.CASCADE)
    kind = models.CharField(max_length=10, choices=InterestKind.choices, default=InterestKind.LIKE)
    status = models.CharField(max_length=7, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('from_user', 'to_user')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['to_user', 'from_user', 'status'], name='interest_to_from_status_idx'),
        ]

    def __str__(self):
        return f"{self.from_user_id} -> {self.to_user_id} ({self.kind}, {self.status})"


class PairLock(models.Model):
    """
    One row per unordered pair of users. Locking it serializes every
    interest write between the two users.
    """
    user1 = models.ForeignKey(User, related_name='+', on_delete=models.CASCADE)
    user2 = models.ForeignKey(User, related_name='+', on_delete=models.CASCADE)

    class Meta:
        unique_together = ('user1', 'user2')


class Match(models.Model):
    user1 = models.ForeignKey(User, related_name='matches_as_user1', on_delete=models.CASCADE)
    user2 = models.ForeignKey(User, related_name='matches_as_user2', on_delete=models.CASCADE)
    origin = models.CharField(max_length=10, choices=InterestKind.choices, default=InterestKind.LIKE)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    unmatched_at = models.DateTimeField(null=True, blank=True)
    unmatched_by = models.ForeignKey(
        User, related_name='+', null=True, blank=True, on_delete=models.SET_NULL
    )

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user1', 'user2'], name='unique_match_per_pair'),
            models.CheckConstraint(condition=models.Q(user1__lt=models.F('user2')), name='match_pair_ordered'),
        ]

    def __str__(self):
        state = 'active' if self.is_active else 'inactive'
        return f"Match {self.user1_id} <-> {self.user2_id} ({state})"

    @property
    def user_ids(self):
        return (self.user1_id, self.user2_id)

    def has_participant(self, user_id):
        return user_id in self.user_ids

    def other_user_id(self, user_id):
        return self.user2_id if user_id == self.user1_id else self.user1_id


"""
SAFETY
"""

class Block(models.Model):
    blocker = models.ForeignKey(User, related_name='blocks_given', on_delete=models.CASCADE)
    blocked = models.ForeignKey(User, related_name='blocks_received', on_delete=models.CASCADE)
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('blocker', 'blocked')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['blocked'], name='block_blocked_idx'),
        ]

    def __str__(self):
        return f"{self.blocker_id} blocked {self.blocked_id}"


class Pass(models.Model):
    user = models.ForeignKey(User, related_name='passes_given', on_delete=models.CASCADE)
    passed_on = models.ForeignKey(User, related_name='passes_received', on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('user', 'passed_on')
        ordering = ['-created_at']
        verbose_name_plural = 'passes'


class Report(models.Model):
    class TargetKind(models.TextChoices):
        USER = 'user', 'User'
        PHOTO = 'photo', 'Photo'
        MESSAGE = 'message', 'Message'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        REVIEWED = 'reviewed', 'Reviewed'
        CLOSED = 'closed', 'Closed'

    STATUS_ORDER = [Status.PENDING, Status.REVIEWED, Status.CLOSED]

    reporter = models.ForeignKey(User, related_name='reports_filed', on_delete=models.CASCADE)
    target_kind = models.CharField(max_length=7, choices=TargetKind.choices)
    target_user = models.ForeignKey(
        User, related_name='reports_received', null=True, blank=True, on_delete=models.SET_NULL
    )
    target_message = models.ForeignKey(
        'Message', related_name='reports', null=True, blank=True, on_delete=models.SET_NULL
    )
    reason = models.CharField(max_length=255)
    details = models.TextField(blank=True)
    status = models.CharField(max_length=8, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Report #{self.pk} ({self.target_kind}, {self.status})"

    def advance(self, status):
        """Move the review status forward. Going backwards raises ValueError."""
        status = self.Status(status)
        if self.STATUS_ORDER.index(status) < self.STATUS_ORDER.index(self.Status(self.status)):
            raise ValueError(f"Cannot move report from {self.status} back to {status}")
        if status != self.status:
            self.status = status
            self.save(update_fields=['status', 'updated_at'])
        return self


"""
CONVERSATIONS
"""

class Conversation(models.Model):
    match = models.OneToOneField(Match, related_name='conversation', on_delete=models.CASCADE)
    message_count = models.PositiveIntegerField(default=0)
    last_message_content = models.TextField(blank=True)
    last_message_at = models.DateTimeField(null=True, blank=True)
    last_message_sender = models.ForeignKey(
        User, related_name='+', null=True, blank=True, on_delete=models.SET_NULL
    )
    deleted_for = models.ManyToManyField(User, related_name='deleted_conversations', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Conversation for match {self.match_id}"


class Message(models.Model):
    conversation = models.ForeignKey(Conversation, related_name='messages', on_delete=models.CASCADE)
    sequence = models.PositiveIntegerField()
    sender = models.ForeignKey(User, related_name='sent_messages', on_delete=models.CASCADE)
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    read_by = models.ManyToManyField(User, related_name='read_messages', blank=True)

    class Meta:
        ordering = ['sequence']
        unique_together = ('conversation', 'sequence')

    def __str__(self):
        return f"Message #{self.sequence} in conversation {self.conversation_id}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ValueError('Messages are immutable once created.')
        super().save(*args, **kwargs)
