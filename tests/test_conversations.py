import pytest

from matching.consumers import authorize_subscriber
from matching.conversations import ConversationService, conversations
from matching.events import MATCH_CREATED, MESSAGE_SENT, MESSAGES_READ, hub
from matching.exceptions import (
    MatchNotActiveError,
    NotFoundError,
    NotParticipantError,
    ValidationError,
)
from matching.feed import feed
from matching.ledger import InterestLedger, ledger
from matching.models import Conversation, Message
from matching.registry import MatchRegistry, registry
from matching.safety import gate


class RecordingSink:
    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)


@pytest.mark.django_db
def test_append_message_assigns_sequence_and_updates_preview(matched_pair):
    alice, bob, match = matched_pair

    first = conversations.append_message(match.pk, alice.id, "  hi  ")
    second = conversations.append_message(match.pk, bob.id, "hey!")

    assert (first.sequence, second.sequence) == (1, 2)
    assert first.content == "  hi  "
    assert set(first.read_by.values_list("id", flat=True)) == {alice.id}

    conversation = Conversation.objects.get(match=match)
    assert conversation.message_count == 2
    assert conversation.last_message_content == "hey!"
    assert conversation.last_message_sender_id == bob.id
    assert conversation.last_message_at == second.created_at


@pytest.mark.django_db
def test_append_message_validation(matched_pair, make_profile, settings):
    alice, _, match = matched_pair
    outsider = make_profile()
    settings.MATCHING = dict(settings.MATCHING, MESSAGE_MAX_LENGTH=10)

    with pytest.raises(ValidationError):
        conversations.append_message(match.pk, alice.id, "   ")
    with pytest.raises(ValidationError):
        conversations.append_message(match.pk, alice.id, "x" * 11)
    with pytest.raises(NotParticipantError):
        conversations.append_message(match.pk, outsider.id, "hello")
    with pytest.raises(NotFoundError):
        conversations.append_message(match.pk + 1000, alice.id, "hello")
    assert Message.objects.count() == 0


@pytest.mark.django_db
def test_unmatched_conversation_is_read_only(matched_pair):
    alice, bob, match = matched_pair
    conversations.append_message(match.pk, alice.id, "hi")
    registry.unmatch(bob.id, alice.id)

    with pytest.raises(MatchNotActiveError):
        conversations.append_message(match.pk, alice.id, "still there?")
    assert [m.content for m in conversations.list_messages(match.pk, alice.id)] == ["hi"]


@pytest.mark.django_db
def test_mark_read_is_idempotent_and_monotonic(matched_pair):
    alice, bob, match = matched_pair
    conversations.append_message(match.pk, alice.id, "one")
    conversations.append_message(match.pk, alice.id, "two")
    conversation = Conversation.objects.get(match=match)

    assert conversations.unread_count(conversation, bob.id) == 2
    assert conversations.mark_read(match.pk, bob.id) == 2
    assert conversations.mark_read(match.pk, bob.id) == 0
    assert conversations.unread_count(conversation, bob.id) == 0

    conversations.append_message(match.pk, alice.id, "three")
    assert conversations.mark_read(match.pk, bob.id) == 1
    for message in Message.objects.all():
        assert set(message.read_by.values_list("id", flat=True)) == {alice.id, bob.id}

    # the sender's own messages never count as unread for them
    assert conversations.mark_read(match.pk, alice.id) == 0


@pytest.mark.django_db
def test_list_messages_pages_backwards(matched_pair):
    alice, bob, match = matched_pair
    for n in range(5):
        conversations.append_message(match.pk, alice.id if n % 2 else bob.id, f"m{n}")

    latest = conversations.list_messages(match.pk, alice.id, limit=2)
    older = conversations.list_messages(match.pk, alice.id, limit=2, before=latest[0].sequence)

    assert [m.sequence for m in latest] == [4, 5]
    assert [m.sequence for m in older] == [2, 3]


@pytest.mark.django_db
def test_list_messages_rejects_out_of_range_limits(matched_pair, settings):
    alice, _, match = matched_pair
    conversations.append_message(match.pk, alice.id, "hi")
    settings.MATCHING = dict(settings.MATCHING, MESSAGE_MAX_PAGE_SIZE=20)

    for limit in (0, -1, 21):
        with pytest.raises(ValidationError):
            conversations.list_messages(match.pk, alice.id, limit=limit)
    assert len(conversations.list_messages(match.pk, alice.id, limit=20)) == 1


@pytest.mark.django_db
def test_subscribe_receives_new_messages_and_read_receipts(matched_pair, django_capture_on_commit_callbacks):
    alice, bob, match = matched_pair

    with conversations.subscribe(match.pk, bob.id) as subscription:
        with django_capture_on_commit_callbacks(execute=True):
            message = conversations.append_message(match.pk, alice.id, "hi")
        with django_capture_on_commit_callbacks(execute=True):
            conversations.mark_read(match.pk, bob.id)

        sent, read = subscription.drain()

    assert sent.type == MESSAGE_SENT
    assert sent.payload["id"] == message.pk
    assert sent.payload["content"] == "hi"
    assert read.type == MESSAGES_READ
    assert read.payload["reader_id"] == bob.id
    assert read.payload["up_to_sequence"] == 1
    assert subscription.closed
    assert hub.subscriber_count(match.pk) == 0


@pytest.mark.django_db
def test_cancelled_subscription_gets_nothing(matched_pair, django_capture_on_commit_callbacks):
    alice, bob, match = matched_pair
    subscription = conversations.subscribe(match.pk, bob.id)
    subscription.cancel()

    with django_capture_on_commit_callbacks(execute=True):
        conversations.append_message(match.pk, alice.id, "anyone?")

    assert subscription.get(timeout=0) is None
    assert subscription.drain() == []


@pytest.mark.django_db
def test_block_cuts_off_live_subscription(matched_pair, django_capture_on_commit_callbacks):
    alice, bob, match = matched_pair
    subscription = conversations.subscribe(match.pk, bob.id)

    with django_capture_on_commit_callbacks(execute=True):
        conversations.append_message(match.pk, alice.id, "queued before the block")
    gate.block(alice.id, bob.id)

    assert subscription.get(timeout=0) is None
    assert subscription.closed
    with pytest.raises(MatchNotActiveError):
        conversations.subscribe(match.pk, bob.id)


@pytest.mark.django_db
def test_block_supersedes_match(matched_pair):
    alice, bob, match = matched_pair
    conversations.append_message(match.pk, alice.id, "hi")

    gate.block(bob.id, alice.id)

    for sender in (alice, bob):
        with pytest.raises(MatchNotActiveError):
            conversations.append_message(match.pk, sender.id, "hello?")
    with pytest.raises(MatchNotActiveError):
        conversations.list_messages(match.pk, alice.id)
    assert conversations.list_conversations(alice.id) == []
    assert bob.id not in [p["user_id"] for p in feed.next_page(alice.id).results]
    assert alice.id not in [p["user_id"] for p in feed.next_page(bob.id).results]

    # the match itself is kept for the audit trail
    match.refresh_from_db()
    assert match.is_active


@pytest.mark.django_db
def test_unblock_restores_conversation(matched_pair):
    alice, bob, match = matched_pair
    gate.block(alice.id, bob.id)
    gate.unblock(alice.id, bob.id)

    message = conversations.append_message(match.pk, bob.id, "welcome back")

    assert conversations.list_messages(match.pk, alice.id) == [message]


@pytest.mark.django_db(transaction=True)
def test_new_match_then_first_message_reaches_subscriber(make_profile):
    sink = RecordingSink()
    service_registry = MatchRegistry(sink=sink)
    alice = make_profile()
    bob = make_profile()

    ledger.record_interest(alice.id, bob.id)
    result = InterestLedger(registry=service_registry).record_interest(bob.id, alice.id)

    assert result.matched
    assert [e.type for e in sink.events] == [MATCH_CREATED]
    assert sorted(sink.events[0].payload["user_ids"]) == sorted([alice.id, bob.id])
    assert result.match.conversation.messages.count() == 0

    service = ConversationService(sink=sink)
    with service.subscribe(result.match.pk, bob.id) as subscription:
        service.append_message(result.match.pk, alice.id, "hi")
        event = subscription.get(timeout=1)

    assert event.type == MESSAGE_SENT
    assert event.payload["content"] == "hi"
    assert sink.events[-1].payload["user_ids"] == [bob.id]


@pytest.mark.django_db
def test_one_sided_like_keeps_target_in_feed_until_passed(make_profile):
    alice = make_profile()
    bob = make_profile()

    ledger.record_interest(alice.id, bob.id)
    assert [p["user_id"] for p in feed.next_page(alice.id).results] == [bob.id]

    feed.record_pass(alice.id, bob.id)
    assert feed.next_page(alice.id).results == []


@pytest.mark.django_db
def test_list_conversations_orders_by_latest_message(make_profile, matched_pair):
    alice, bob, match = matched_pair
    carol = make_profile()
    ledger.record_interest(carol.id, alice.id)
    other = ledger.record_interest(alice.id, carol.id).match
    dave = make_profile()
    ledger.record_interest(dave.id, alice.id)
    quiet = ledger.record_interest(alice.id, dave.id).match

    conversations.append_message(match.pk, bob.id, "first")
    conversations.append_message(other.pk, carol.id, "second")

    listed = [c.match_id for c in conversations.list_conversations(alice.id)]

    assert listed == [other.pk, match.pk, quiet.pk]


@pytest.mark.django_db
def test_delete_conversation_hides_it_for_one_side_only(matched_pair):
    alice, bob, match = matched_pair
    conversations.append_message(match.pk, alice.id, "hi")

    conversations.delete_conversation(match.pk, alice.id)

    assert conversations.list_conversations(alice.id) == []
    assert [c.match_id for c in conversations.list_conversations(bob.id)] == [match.pk]
    with pytest.raises(NotFoundError):
        conversations.list_messages(match.pk, alice.id)
    assert len(conversations.list_messages(match.pk, bob.id)) == 1


@pytest.mark.django_db
def test_authorize_subscriber(matched_pair, make_profile):
    alice, bob, match = matched_pair
    outsider = make_profile()

    assert authorize_subscriber(match.pk, alice.id) == match
    assert authorize_subscriber(match.pk, outsider.id) is None
    assert authorize_subscriber(match.pk + 1000, alice.id) is None

    gate.block(bob.id, alice.id)
    assert authorize_subscriber(match.pk, alice.id) is None
