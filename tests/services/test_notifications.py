import httpx
import pytest
from unittest.mock import patch

from gastos.models.event import Event
from gastos.services.notifications import HttpPushSender, NotificationDispatcher, PushMessage


def make_event():
    return Event(titulo="Cena", moneda="USD", monto=50.0, repeticion="unico", creado_por="u1", token_invitacion="t")


@pytest.mark.asyncio
async def test_send_uses_latest_active_token(notifier, push_token_repo, sender):
    await push_token_repo.register("u2", "viejo")
    await push_token_repo.register("u2", "nuevo")
    await push_token_repo.deactivate("u2", "nuevo")

    assert await notifier.send("u2", PushMessage(title="t", body="b")) is True
    assert [token for token, _ in sender.sent] == ["viejo"]


@pytest.mark.asyncio
async def test_no_token_means_no_push(notifier, sender):
    assert await notifier.notify_event_closed(make_event(), "u2", 25.0) is False
    assert sender.sent == []


@pytest.mark.asyncio
async def test_delivery_failure_is_reported_not_raised(push_token_repo, failing_sender):
    await push_token_repo.register("u2", "device")
    notifier = NotificationDispatcher(push_token_repo, failing_sender)

    assert await notifier.notify_event_closed(make_event(), "u2", 25.0) is False


@pytest.mark.asyncio
async def test_close_message_text(notifier, push_token_repo, sender):
    await push_token_repo.register("u2", "device")
    event = make_event()

    await notifier.notify_event_closed(event, "u2", 16.666)

    message = sender.sent[0][1]
    assert message.title == "Evento Cerrado"
    assert message.body == 'Evento "Cena" cerrado. Debes 16.67 USD'
    assert message.data == {"tipo": "EVENTO_CERRADO", "evento_id": event.id}


@pytest.mark.asyncio
async def test_http_sender_without_endpoint_is_a_no_op():
    sender = HttpPushSender(endpoint_url="")

    with patch("gastos.services.notifications.httpx.AsyncClient") as client_cls:
        await sender.send("device", PushMessage(title="t", body="b"))
    client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_http_sender_posts_to_gateway():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient

    with patch(
        "gastos.services.notifications.httpx.AsyncClient",
        side_effect=lambda **kwargs: real_client(transport=transport, **kwargs)
    ):
        await HttpPushSender("https://push.test/send", "clave").send("device", PushMessage(title="t", body="b"))

    assert len(requests) == 1
    assert requests[0].headers["Authorization"] == "Bearer clave"
    assert b'"token":"device"' in requests[0].content.replace(b" ", b"")


@pytest.mark.asyncio
async def test_http_sender_raises_on_gateway_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    real_client = httpx.AsyncClient

    with patch(
        "gastos.services.notifications.httpx.AsyncClient",
        side_effect=lambda **kwargs: real_client(transport=transport, **kwargs)
    ):
        with pytest.raises(httpx.HTTPStatusError):
            await HttpPushSender("https://push.test/send").send("device", PushMessage(title="t", body="b"))
