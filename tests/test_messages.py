"""Support messages and system alerts."""

from medischedule.features.messages.models import ADMIN_GROUP
from medischedule.features.messages.schemas import SendMessageRequest
from medischedule.features.messages.service import MessageService


async def test_doctor_messages_go_to_admin_team(store, doctor, seeded):
    result = await MessageService.send_message(store, doctor, SendMessageRequest(text="OT-2 lights are flickering"))

    message = await store.get("messages", result.id)
    assert message.receiver_id == ADMIN_GROUP
    assert message.type == "manual"


async def test_doctor_cannot_message_a_user_directly(store, doctor, other_doctor, seeded):
    result = await MessageService.send_message(
        store, doctor, SendMessageRequest(text="Swap shifts?", receiver_id=other_doctor.id)
    )

    assert result.kind == "forbidden"


async def test_admin_reply_needs_receiver(store, admin, seeded):
    result = await MessageService.send_message(store, admin, SendMessageRequest(text="Noted"))

    assert result.kind == "validation"


async def test_conversation_thread(store, admin, doctor, other_doctor, seeded):
    await MessageService.send_message(store, doctor, SendMessageRequest(text="Need a second scrub nurse"))
    await MessageService.send_message(store, admin, SendMessageRequest(text="Assigned Nurse Adoma", receiver_id=doctor.id))
    await MessageService.send_message(store, other_doctor, SendMessageRequest(text="Unrelated"))
    await MessageService.notify(store, admin, doctor.id, "Your request was approved")

    thread = await MessageService.list_conversation(store, doctor)
    admin_view = await MessageService.list_conversation(store, admin, doctor.id)
    inbox = await MessageService.list_admin_inbox(store)

    assert [m.text for m in thread] == ["Need a second scrub nurse", "Assigned Nurse Adoma"]
    assert [m.id for m in admin_view] == [m.id for m in thread]
    assert len(inbox) == 2


async def test_mark_read_only_by_recipient(store, admin, doctor, other_doctor, seeded):
    sent = await MessageService.send_message(store, doctor, SendMessageRequest(text="Help"))
    alert = await MessageService.notify(store, admin, doctor.id, "Operation moved")

    assert (await MessageService.mark_read(store, other_doctor, alert.id)).kind == "forbidden"
    assert (await MessageService.mark_read(store, doctor, alert.id)).ok
    assert (await MessageService.mark_read(store, admin, sent.id)).ok
    assert (await store.get("messages", sent.id)).read


async def test_mark_all_alerts_read(store, admin, doctor, seeded):
    await MessageService.notify(store, admin, doctor.id, "Approved")
    await MessageService.notify(store, admin, doctor.id, "Rejected")

    updated = await MessageService.mark_all_read(store, doctor)

    assert updated == 2
    assert all(m.read for m in await MessageService.list_alerts(store, doctor))


async def test_responses_name_senders(store, admin, doctor, seeded):
    await MessageService.send_message(store, doctor, SendMessageRequest(text="Hello"))
    await MessageService.notify(store, admin, doctor.id, "Approved")

    responses = await MessageService.to_responses(store, await store.find("messages", sort=[("timestamp", 1)]))

    assert {r.senderName for r in responses} == {"Ama Mensah", "System"}
