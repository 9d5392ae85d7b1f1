import logging

from django.db import transaction
from django.db.models import F, Q

from .conf import get_setting
from .events import MESSAGE_SENT, MESSAGES_READ, Event, get_event_sink, hub as default_hub
from .exceptions import MatchNotActiveError, NotFoundError, NotParticipantError, ValidationError
from .models import Conversation, Match, Message
from .safety import gate as default_gate

logger = logging.getLogger(__name__)


def message_payload(message):
    return {
        'id': message.pk,
        'match_id': message.conversation.match_id,
        'sequence': message.sequence,
        'sender_id': message.sender_id,
        'content': message.content,
        'created_at': message.created_at.isoformat(),
    }


class ConversationService:
    """
    Sole writer of Message records. Every read and write asks the safety gate
    first; unmatched conversations are read-only, blocked ones are hidden.
    """

    def __init__(self, safety=None, hub=None, sink=None):
        self.safety = safety or default_gate
        self.hub = hub or default_hub
        self._sink = sink

    @property
    def sink(self):
        return self._sink or get_event_sink()

    def _participant_match(self, match_id, user_id, lock=False):
        qs = Match.objects.select_for_update() if lock else Match.objects.select_related('conversation')
        try:
            match = qs.get(pk=match_id)
        except (Match.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f'Match {match_id} not found.')
        if not match.has_participant(user_id):
            raise NotParticipantError()
        return match

    def _ensure_not_blocked(self, match):
        if self.safety.is_blocked_between(match.user1_id, match.user2_id):
            raise MatchNotActiveError('This conversation is no longer available.')

    def append_message(self, match_id, sender_id, content):
        content = content or ''
        if not content.strip():
            raise ValidationError('Message content cannot be empty.')
        max_length = get_setting('MESSAGE_MAX_LENGTH')
        if len(content) > max_length:
            raise ValidationError(f'Messages are limited to {max_length} characters.')

        with transaction.atomic():
            match = self._participant_match(match_id, sender_id, lock=True)
            if not match.is_active:
                raise MatchNotActiveError()
            self._ensure_not_blocked(match)

            conversation = Conversation.objects.select_for_update().get(match=match)
            conversation.message_count += 1
            message = Message.objects.create(
                conversation=conversation,
                sequence=conversation.message_count,
                sender_id=sender_id,
                content=content,
            )
            message.read_by.add(sender_id)

            conversation.last_message_content = content
            conversation.last_message_at = message.created_at
            conversation.last_message_sender_id = sender_id
            conversation.save(update_fields=[
                'message_count', 'last_message_content', 'last_message_at', 'last_message_sender',
            ])

            payload = message_payload(message)
            payload['read_by'] = [sender_id]
            event = Event(MESSAGE_SENT, payload)
            notification = Event(MESSAGE_SENT, dict(payload, user_ids=[match.other_user_id(sender_id)]))
            transaction.on_commit(lambda: self._publish(match.pk, event, notification))
        return message

    def _publish(self, match_id, event, notification=None):
        self.hub.publish(match_id, event)
        if notification is not None:
            self.sink.emit(notification)

    def mark_read(self, match_id, reader_id):
        """Mark everything the other side sent as read by reader_id. Returns how many changed."""
        match = self._participant_match(match_id, reader_id)
        self._ensure_not_blocked(match)

        unread = list(
            match.conversation.messages
            .exclude(sender_id=reader_id)
            .exclude(read_by=reader_id)
            .values_list('id', 'sequence')
        )
        if not unread:
            return 0

        receipt = Message.read_by.through
        with transaction.atomic():
            receipt.objects.bulk_create(
                [receipt(message_id=message_id, user_id=reader_id) for message_id, _ in unread],
                ignore_conflicts=True,
            )
            event = Event(MESSAGES_READ, {
                'match_id': match.pk,
                'reader_id': reader_id,
                'message_ids': [message_id for message_id, _ in unread],
                'up_to_sequence': max(sequence for _, sequence in unread),
            })
            transaction.on_commit(lambda: self._publish(match.pk, event))
        return len(unread)

    def subscribe(self, match_id, reader_id):
        match = self.check_subscriber(match_id, reader_id)
        user1, user2 = match.user_ids
        return self.hub.subscribe(
            match.pk, reader_id, lambda: not self.safety.is_blocked_between(user1, user2)
        )

    def check_subscriber(self, match_id, reader_id):
        match = self._participant_match(match_id, reader_id)
        self._ensure_not_blocked(match)
        return match

    def list_messages(self, match_id, reader_id, limit=None, before=None):
        """
        Up to `limit` most recent messages (optionally older than sequence
        `before`), returned oldest first.
        """
        match = self._participant_match(match_id, reader_id)
        self._ensure_not_blocked(match)
        conversation = match.conversation
        if conversation.deleted_for.filter(pk=reader_id).exists():
            raise NotFoundError('Conversation not found.')

        limit = limit if limit is not None else get_setting('MESSAGE_PAGE_SIZE')
        max_limit = get_setting('MESSAGE_MAX_PAGE_SIZE')
        if limit < 1 or limit > max_limit:
            raise ValidationError(f'limit must be between 1 and {max_limit}.')
        qs = conversation.messages.prefetch_related('read_by')
        if before is not None:
            qs = qs.filter(sequence__lt=before)
        messages = list(qs.order_by('-sequence')[:limit])
        messages.reverse()
        return messages

    def list_conversations(self, user_id):
        hidden = self.safety.blocked_user_ids(user_id)
        qs = (
            Conversation.objects
            .filter(Q(match__user1_id=user_id) | Q(match__user2_id=user_id))
            .exclude(deleted_for=user_id)
            .select_related('match')
            .order_by(F('last_message_at').desc(nulls_last=True), '-created_at')
        )
        return [c for c in qs if c.match.other_user_id(user_id) not in hidden]

    def unread_count(self, conversation, user_id):
        return conversation.messages.exclude(sender_id=user_id).exclude(read_by=user_id).count()

    def delete_conversation(self, match_id, user_id):
        """Hide the conversation for user_id only; the other participant keeps it."""
        match = self._participant_match(match_id, user_id)
        match.conversation.deleted_for.add(user_id)
        logger.info('User %s deleted conversation of match %s', user_id, match.pk)
        return match.conversation


conversations = ConversationService()
