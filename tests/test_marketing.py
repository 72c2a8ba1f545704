import pytest

from foodzy.schemas import BulkEmailRequest
from foodzy.services.email import MockEmailService
from foodzy.services.marketing import BulkEmailError, render_message, send_bulk_email

from conftest import auth_headers


class UnconfiguredEmailService(MockEmailService):
    @property
    def is_configured(self) -> bool:
        return False


@pytest.fixture
def quiet_email():
    return MockEmailService(failure_rate=0.0, latency=(0.0, 0.0))


@pytest.fixture
def users(gateway):
    async def create(*emails):
        for email in emails:
            await gateway.sign_up(email, "secret123")
    return create


def request(**overrides):
    return BulkEmailRequest(**{"subject": "Weekend deal", "message": "Half price\nall day", **overrides})


def test_render_message_escapes_and_keeps_lines():
    assert render_message("a < b\nc & d") == "<p>a &lt; b<br>c &amp; d</p>"


@pytest.mark.asyncio
async def test_sends_one_email_per_user(gateway, users, quiet_email):
    await users("a@example.com", "b@example.com")

    result = await send_bulk_email(gateway, quiet_email, request())

    assert result.message == "Successfully sent 2 emails"
    assert result.sent == 2
    assert sorted(to for to, _, _ in quiet_email.outbox) == ["a@example.com", "b@example.com"]
    assert quiet_email.outbox[0][2] == "<p>Half price<br>all day</p>"


@pytest.mark.asyncio
async def test_partial_failures_are_reported(gateway, users):
    await users("a@example.com", "b@example.com", "c@example.com", "d@example.com", "e@example.com")
    failing = ["b@example.com", "c@example.com", "d@example.com", "e@example.com"]
    service = MockEmailService(failure_rate=0.0, latency=(0.0, 0.0), failing_recipients=failing)

    result = await send_bulk_email(gateway, service, request())

    assert result.success is True
    assert result.message == "Sent 1 emails successfully, 4 failed"
    assert result.failed == 4
    assert len(result.errors) == 3


@pytest.mark.asyncio
async def test_no_recipients(gateway, quiet_email):
    result = await send_bulk_email(gateway, quiet_email, request())

    assert result.message == "No valid recipients found"
    assert quiet_email.outbox == []


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides, status, message", [
    ({"subject": ""}, 400, "Subject and message are required"),
    ({"message": None}, 400, "Subject and message are required"),
    ({"target_audience": "vip"}, 400, "Invalid target audience"),
])
async def test_rejected_requests(gateway, users, quiet_email, overrides, status, message):
    await users("a@example.com")

    with pytest.raises(BulkEmailError) as error:
        await send_bulk_email(gateway, quiet_email, request(**overrides))

    assert error.value.status_code == status
    assert error.value.message == message
    assert quiet_email.outbox == []


@pytest.mark.asyncio
async def test_unconfigured_service(gateway):
    with pytest.raises(BulkEmailError) as error:
        await send_bulk_email(gateway, UnconfiguredEmailService(), request())

    assert error.value.status_code == 500


def test_send_email_route(client, admin, customer, email_service):
    body = {"subject": "Hello", "message": "New menu!", "targetAudience": "all"}

    assert client.post("/api/admin/send-email", json=body, headers=auth_headers(customer)).status_code == 403

    response = client.post("/api/admin/send-email", json=body, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["message"] == "Successfully sent 2 emails"
    assert len(email_service.outbox) == 2

    missing = client.post("/api/admin/send-email", json={"subject": "Hi"}, headers=auth_headers(admin))
    assert missing.status_code == 400
