from rest_framework import serializers

from .conversations import conversations
from .exceptions import ValidationError
from .feed import Preferences
from .models import InterestKind, Message, Profile, Report


class ProfileSerializer(serializers.ModelSerializer):
    """
    The owner's own profile, including visibility flags. Other users only
    ever receive Profile.project().
    """
    tags = serializers.ListField(child=serializers.CharField(max_length=40), required=False)

    class Meta:
        model = Profile
        fields = [
            'display_name', 'bio', 'tags', 'age', 'location', 'location_lat', 'location_lng',
            'gender_identity', 'sexual_orientation', 'pronouns',
            'profile_visible', 'age_visible', 'location_visible', 'gender_identity_visible',
            'sexual_orientation_visible', 'pronouns_visible', 'created_at',
        ]
        read_only_fields = ['created_at']

    def validate_tags(self, value):
        # trimmed, title case, no duplicates
        seen = []
        for tag in value:
            tag = tag.strip().title()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class PreferencesSerializer(serializers.Serializer):
    """Wraps feed.Preferences; "all" or a missing value means no filter."""

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise ValidationError('Preferences must be an object.')
        return Preferences.from_data(data)

    def to_representation(self, instance):
        return instance.as_data()


class InterestInputSerializer(serializers.Serializer):
    target_id = serializers.IntegerField()
    kind = serializers.ChoiceField(choices=InterestKind.choices, default=InterestKind.LIKE)


class TargetSerializer(serializers.Serializer):
    target_id = serializers.IntegerField()


class BlockInputSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class ReportInputSerializer(serializers.Serializer):
    target_kind = serializers.ChoiceField(choices=Report.TargetKind.choices)
    target_user_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    message_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    reason = serializers.CharField(max_length=255)
    details = serializers.CharField(required=False, allow_blank=True, default='')


class ReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Report
        fields = ['id', 'target_kind', 'target_user', 'target_message', 'reason', 'details', 'status', 'created_at']
        read_only_fields = fields


class MessageSerializer(serializers.ModelSerializer):
    sender_id = serializers.IntegerField(read_only=True)
    read_by = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Message
        fields = ['id', 'sequence', 'sender_id', 'content', 'created_at', 'read_by']
        read_only_fields = fields


class MessageInputSerializer(serializers.Serializer):
    content = serializers.CharField(trim_whitespace=False)


def _counterpart_view(user_id, match):
    profile = Profile.objects.filter(pk=match.other_user_id(user_id)).first()
    return profile.project() if profile else None


class MatchSerializer(serializers.Serializer):
    match_id = serializers.IntegerField(source='pk')
    origin = serializers.CharField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    profile = serializers.SerializerMethodField()

    def get_profile(self, obj):
        return _counterpart_view(self.context['user_id'], obj)


class ConversationSerializer(serializers.Serializer):
    match_id = serializers.IntegerField()
    is_active = serializers.BooleanField(source='match.is_active')
    last_message = serializers.CharField(source='last_message_content')
    last_message_at = serializers.DateTimeField(allow_null=True)
    last_message_sender = serializers.IntegerField(source='last_message_sender_id', allow_null=True)
    unread_count = serializers.SerializerMethodField()
    profile = serializers.SerializerMethodField()

    def get_unread_count(self, obj):
        return conversations.unread_count(obj, self.context['user_id'])

    def get_profile(self, obj):
        return _counterpart_view(self.context['user_id'], obj.match)
