"""Relay function — called directly, without the HTTP layer."""

import pytest

from app.models.contact import ContactResponse
from app.services.contact_relay import check_configuration, parse_payload, relay_submission
from app.utils.errors import (
    ConfigurationError,
    DeliveryError,
    SubmissionValidationError,
    VerificationError,
)
from tests.fakes import make_settings


def test_check_configuration_passes_with_secret_and_destination():
    check_configuration(make_settings())


def test_check_configuration_requires_secret():
    with pytest.raises(ConfigurationError) as exc:
        check_configuration(make_settings(turnstile_secret_key=None))
    assert exc.value.status_code == 500


def test_parse_payload_rejects_non_object():
    with pytest.raises(SubmissionValidationError) as exc:
        parse_payload(["not", "a", "dict"])
    assert exc.value.message == "Invalid input."


@pytest.mark.asyncio
async def test_relay_success(upstream, base_payload):
    async with upstream.client() as client:
        result = await relay_submission(
            base_payload, settings=make_settings(), client=client, remote_ip="203.0.113.1",
        )

    assert result == ContactResponse(ok=True)
    assert len(upstream.verify_calls) == 1
    assert len(upstream.delivery_calls) == 1


@pytest.mark.asyncio
async def test_relay_honeypot_never_touches_network(upstream, base_payload):
    async with upstream.client() as client:
        result = await relay_submission(
            {**base_payload, "honeypot": "http://spam"}, settings=make_settings(), client=client,
        )

    assert result.ok is True
    assert upstream.verify_calls == []
    assert upstream.delivery_calls == []


@pytest.mark.asyncio
async def test_relay_verification_rejection_keeps_error_codes(upstream, base_payload):
    upstream.verify_body = {"success": False, "error-codes": ["timeout-or-duplicate"]}

    async with upstream.client() as client:
        with pytest.raises(VerificationError) as exc:
            await relay_submission(base_payload, settings=make_settings(), client=client)

    assert exc.value.error_codes == ["timeout-or-duplicate"]
    assert upstream.delivery_calls == []


@pytest.mark.asyncio
async def test_relay_delivery_error_message(upstream, base_payload):
    upstream.delivery_status = 400
    upstream.delivery_body = {"error": "Form not found"}

    async with upstream.client() as client:
        with pytest.raises(DeliveryError) as exc:
            await relay_submission(base_payload, settings=make_settings(), client=client)

    assert exc.value.message == "Form not found"
    assert exc.value.status_code == 502
