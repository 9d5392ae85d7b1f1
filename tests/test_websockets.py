import pytest
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import AccessToken

from matching.conversations import conversations
from matching.events import MESSAGE_SENT
from matching.middleware import raw_token

IN_MEMORY_LAYER = {'default': {'BACKEND': 'channels.layers.InMemoryChannelLayer'}}


@pytest.fixture
def channel_layer(settings):
    settings.CHANNEL_LAYERS = IN_MEMORY_LAYER


def asgi_application():
    from pulse_backend.asgi import application
    return application


def try_connect(path, headers=None):
    async def connect():
        communicator = WebsocketCommunicator(asgi_application(), path, headers=headers or [])
        connected, _ = await communicator.connect()
        await communicator.disconnect()
        return connected
    return async_to_sync(connect)()


def test_token_is_read_from_query_or_header():
    assert raw_token({'query_string': b'token=abc'}) == 'abc'
    assert raw_token({'query_string': b'', 'headers': [(b'authorization', b'Bearer xyz')]}) == 'xyz'
    assert raw_token({'query_string': b'', 'headers': [(b'authorization', b'Basic xyz')]}) is None
    assert raw_token({'query_string': b''}) is None


@pytest.mark.django_db(transaction=True)
def test_participant_with_jwt_receives_conversation_events(matched_pair, channel_layer):
    alice, bob, match = matched_pair
    token = str(AccessToken.for_user(alice))

    async def scenario():
        communicator = WebsocketCommunicator(
            asgi_application(), f"/ws/conversations/{match.pk}/?token={token}"
        )
        connected, _ = await communicator.connect()
        assert connected
        await database_sync_to_async(conversations.append_message)(match.pk, bob.id, "hello alice")
        event = await communicator.receive_json_from(timeout=2)
        await communicator.disconnect()
        return event

    event = async_to_sync(scenario)()

    assert event["type"] == MESSAGE_SENT
    assert event["payload"]["content"] == "hello alice"
    assert event["payload"]["sender_id"] == bob.id


@pytest.mark.django_db(transaction=True)
def test_bearer_header_is_accepted(matched_pair, channel_layer):
    alice, _, match = matched_pair
    header = f"Bearer {AccessToken.for_user(alice)}".encode()

    assert try_connect(f"/ws/conversations/{match.pk}/", [(b"authorization", header)])
    assert try_connect("/ws/notifications/", [(b"authorization", header)])


@pytest.mark.django_db(transaction=True)
def test_socket_rejects_missing_bad_or_foreign_tokens(matched_pair, make_profile, channel_layer):
    _, _, match = matched_pair
    outsider = make_profile()
    path = f"/ws/conversations/{match.pk}/"

    assert not try_connect(path)
    assert not try_connect(f"{path}?token=not-a-jwt")
    assert not try_connect(f"{path}?token={AccessToken.for_user(outsider)}")
