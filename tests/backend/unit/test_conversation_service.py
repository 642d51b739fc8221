"""
Tests for services.conversation: roster, history and send orchestration.
"""
import uuid

import pytest
import pytest_asyncio

from app.core.errors import AttachmentUploadFailed, NotFound, ValidationError
from app.models.message import Message
from app.services.conversation import ConversationService
from app.services.credential_store import CredentialStore
from app.services.message_store import MessageStore


pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def people(create_user):
    alice, _ = await create_user(full_name="Alice")
    bob, _ = await create_user(full_name="Bob")
    return alice, bob


@pytest.fixture
def service_for(blob_store):
    def _service_for(me):
        return ConversationService(me, CredentialStore(blob_store), MessageStore(), blob_store)
    return _service_for


async def test_roster_excludes_caller(people, service_for, create_user):
    alice, bob = people
    carol, _ = await create_user(full_name="Carol")

    roster = await service_for(alice).get_roster()
    assert [u.id for u in roster] == [bob.id, carol.id]


async def test_history_requires_existing_user(people, service_for):
    alice, _ = people
    service = service_for(alice)
    with pytest.raises(NotFound):
        await service.get_history(str(uuid.uuid4()))
    with pytest.raises(NotFound):
        await service.get_history("garbage")


async def test_send_and_read_back_from_both_sides(people, service_for):
    alice, bob = people
    sent = await service_for(alice).send(str(bob.id), "hi")
    reply = await service_for(bob).send(str(alice.id), "hey")

    alice_view = await service_for(alice).get_history(str(bob.id))
    bob_view = await service_for(bob).get_history(str(alice.id))
    assert [m.id for m in alice_view] == [sent.id, reply.id]
    assert [m.id for m in bob_view] == [sent.id, reply.id]


async def test_send_payload_combinations(people, service_for, blob_store, png_data_uri):
    alice, bob = people
    service = service_for(alice)

    with pytest.raises(ValidationError):
        await service.send(str(bob.id), "", None)
    with pytest.raises(ValidationError):
        await service.send(str(bob.id), None, "")

    text_only = await service.send(str(bob.id), "hello")
    image_only = await service.send(str(bob.id), "", png_data_uri)
    both = await service.send(str(bob.id), "caption", png_data_uri)

    assert text_only.image is None
    assert image_only.image == "https://blobs.test/1.png"
    assert both.image == "https://blobs.test/2.png"
    assert len(blob_store.uploads) == 2


async def test_send_to_unknown_user(people, service_for, blob_store, png_data_uri):
    alice, _ = people
    with pytest.raises(NotFound):
        await service_for(alice).send(str(uuid.uuid4()), "hello?", png_data_uri)
    assert blob_store.uploads == []
    assert await Message.all().count() == 0


async def test_failed_upload_persists_nothing(people, service_for, blob_store, png_data_uri):
    alice, bob = people
    blob_store.fail = True
    with pytest.raises(AttachmentUploadFailed):
        await service_for(alice).send(str(bob.id), "with picture", png_data_uri)
    assert await Message.all().count() == 0


async def test_malformed_image_is_rejected_before_upload(people, service_for, blob_store):
    alice, bob = people
    with pytest.raises(ValidationError):
        await service_for(alice).send(str(bob.id), "pic", "data:image/png;base64,@@@")
    assert blob_store.uploads == []


async def test_self_message(people, service_for):
    alice, _ = people
    note = await service_for(alice).send(str(alice.id), "reminder")
    history = await service_for(alice).get_history(str(alice.id))
    assert [m.id for m in history] == [note.id]


@pytest.mark.parametrize("receiver", [None, "", "   "])
async def test_send_requires_receiver(people, service_for, receiver):
    alice, _ = people
    with pytest.raises(ValidationError):
        await service_for(alice).send(receiver, "hi")
    assert await Message.all().count() == 0
