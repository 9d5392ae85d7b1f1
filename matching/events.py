import logging
import queue
import threading
from dataclasses import dataclass, field

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils.module_loading import import_string

from .conf import get_setting

logger = logging.getLogger(__name__)

MATCH_CREATED = 'match_created'
MESSAGE_SENT = 'message_sent'
MESSAGES_READ = 'messages_read'


@dataclass(frozen=True)
class Event:
    type: str
    payload: dict = field(default_factory=dict)

    def as_dict(self):
        return {'type': self.type, 'payload': self.payload}


def profile_group(user_id):
    return f'profile_{user_id}'


def conversation_group(match_id):
    return f'conversation_{match_id}'


"""
SINKS (push notification boundary)
"""

class NullSink:
    def emit(self, event):
        return None


class ChannelLayerSink:
    """
    Forwards match / message events to each recipient's profile group on the
    configured channel layer. Delivery to devices happens elsewhere.
    """

    def emit(self, event):
        channel_layer = get_channel_layer()
        if not channel_layer:
            return
        for user_id in event.payload.get('user_ids', []):
            async_to_sync(channel_layer.group_send)(
                profile_group(user_id),
                {'type': 'notification_event', 'data': event.as_dict()}
            )


def get_event_sink():
    return import_string(get_setting('EVENT_SINK'))()


"""
CONVERSATION SUBSCRIPTIONS
"""

class Subscription:
    """
    Live, cancellable stream of events for one conversation, scoped to one
    reader. `allowed` is re-evaluated before every event is handed out; once
    it returns False the subscription closes itself.
    """

    def __init__(self, hub, match_id, reader_id, allowed):
        self.hub = hub
        self.match_id = match_id
        self.reader_id = reader_id
        self._allowed = allowed
        self._queue = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self):
        return self._closed.is_set()

    def cancel(self):
        if self._closed.is_set():
            return
        self._closed.set()
        self.hub.discard(self)
        # wake up a reader blocked in get()
        self._queue.put(None)

    def deliver(self, event):
        if not self._closed.is_set():
            self._queue.put(event)

    def get(self, timeout=None):
        """Next event, or None when cancelled, cut off by a block, or timed out."""
        if self._closed.is_set():
            return None
        try:
            event = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        if event is None or self._closed.is_set():
            return None
        if not self._allowed():
            logger.info('Closing subscription of user %s to match %s: blocked', self.reader_id, self.match_id)
            self.cancel()
            return None
        return event

    def drain(self):
        """Every event already queued, without waiting."""
        events = []
        while True:
            event = self.get(timeout=0)
            if event is None:
                return events
            events.append(event)

    def __iter__(self):
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.cancel()


class ConversationHub:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions = {}

    def subscribe(self, match_id, reader_id, allowed):
        subscription = Subscription(self, match_id, reader_id, allowed)
        with self._lock:
            self._subscriptions.setdefault(match_id, set()).add(subscription)
        return subscription

    def discard(self, subscription):
        with self._lock:
            subscribers = self._subscriptions.get(subscription.match_id)
            if subscribers is None:
                return
            subscribers.discard(subscription)
            if not subscribers:
                del self._subscriptions[subscription.match_id]

    def subscriber_count(self, match_id):
        with self._lock:
            return len(self._subscriptions.get(match_id, ()))

    def publish(self, match_id, event):
        with self._lock:
            subscribers = list(self._subscriptions.get(match_id, ()))
        for subscription in subscribers:
            subscription.deliver(event)

        channel_layer = get_channel_layer()
        if channel_layer:
            async_to_sync(channel_layer.group_send)(
                conversation_group(match_id),
                {'type': 'conversation_event', 'data': event.as_dict()}
            )


hub = ConversationHub()
