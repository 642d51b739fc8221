"""
Tests for services.message_store: payload validation, ordering and
conversation symmetry.
"""
import pytest
import pytest_asyncio

from app.core.errors import ValidationError
from app.models.message import Message, pair_key
from app.services.message_store import MessageStore


pytestmark = pytest.mark.asyncio


@pytest.fixture
def store(db):
    return MessageStore()


@pytest_asyncio.fixture
async def users(create_user):
    alice, _ = await create_user(full_name="Alice")
    bob, _ = await create_user(full_name="Bob")
    carol, _ = await create_user(full_name="Carol")
    return alice, bob, carol


async def test_pair_key_is_order_independent():
    assert pair_key("b", "a") == pair_key("a", "b") == "a:b"


async def test_message_needs_text_or_image(store, users):
    alice, bob, _ = users
    with pytest.raises(ValidationError):
        await store.create(alice.id, bob.id, "")
    with pytest.raises(ValidationError):
        await store.create(alice.id, bob.id, None, None)
    assert await Message.all().count() == 0

    text_only = await store.create(alice.id, bob.id, "hi")
    image_only = await store.create(alice.id, bob.id, "", "https://blobs.test/1.png")
    both = await store.create(alice.id, bob.id, "look", "https://blobs.test/2.png")

    assert text_only.image is None
    assert image_only.text == ""
    assert both.image == "https://blobs.test/2.png"


async def test_created_at_strictly_increases(store, users):
    alice, bob, _ = users
    created = [await store.create(alice.id, bob.id, f"m{i}") for i in range(20)]
    stamps = [m.created_at for m in created]
    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


async def test_conversation_is_symmetric_and_exact(store, users):
    alice, bob, carol = users
    m1 = await store.create(alice.id, bob.id, "hi bob")
    await store.create(alice.id, carol.id, "hi carol")
    m2 = await store.create(bob.id, alice.id, "hi alice")
    await store.create(carol.id, bob.id, "carol to bob")
    m3 = await store.create(alice.id, bob.id, "how are you")

    ab = await store.list_conversation(alice.id, bob.id)
    ba = await store.list_conversation(bob.id, alice.id)

    assert [m.id for m in ab] == [m1.id, m2.id, m3.id]
    assert [m.id for m in ba] == [m.id for m in ab]
    for m in ab:
        assert {m.sender_id, m.receiver_id} == {alice.id, bob.id}


async def test_self_messages_are_allowed(store, users):
    alice, bob, _ = users
    note = await store.create(alice.id, alice.id, "note to self")
    await store.create(alice.id, bob.id, "hi")

    own = await store.list_conversation(alice.id, alice.id)
    assert [m.id for m in own] == [note.id]


async def test_empty_conversation(store, users):
    alice, _, carol = users
    assert await store.list_conversation(alice.id, carol.id) == []


async def test_equal_timestamps_have_a_stable_order(store, users):
    alice, bob, _ = users
    first = await store.create(alice.id, bob.id, "first")
    # Rows written with an identical created_at, e.g. by two racing inserts
    twins = [
        await Message.create(sender_id=bob.id, receiver_id=alice.id, pair_key=pair_key(alice.id, bob.id),
                             text=f"twin {i}", created_at=first.created_at)
        for i in range(3)
    ]

    history = await store.list_conversation(alice.id, bob.id)
    tied = sorted([first, *twins], key=lambda m: str(m.id))
    assert [m.id for m in history] == [m.id for m in tied]
    assert [m.id for m in await store.list_conversation(bob.id, alice.id)] == [m.id for m in history]
