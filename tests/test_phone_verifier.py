"""Tests for phone number verification outcomes."""

import pytest

from beautybird.providers.messagebird import ProviderError
from beautybird.schemas.booking_schema import LineType, RejectionReason
from beautybird.tools.phone_verifier import PhoneVerifier
from tests.conftest import FakeProvider


class TestVerify:
    @pytest.mark.asyncio
    async def test_mobile_number_verified(self):
        provider = FakeProvider(normalized="+31612345678")
        contact, reason = await PhoneVerifier(provider).verify("0612345678", "NL")
        assert reason is None
        assert contact.normalized_phone_number == "+31612345678"
        assert contact.line_type == LineType.MOBILE

    @pytest.mark.asyncio
    async def test_passes_raw_number_and_country_code(self):
        provider = FakeProvider()
        await PhoneVerifier(provider).verify("06 1234 5678", "NL")
        assert provider.lookups == [("06 1234 5678", "NL")]

    @pytest.mark.asyncio
    async def test_unknown_format(self):
        provider = FakeProvider(lookup_error=ProviderError(21, "Bad request"))
        contact, reason = await PhoneVerifier(provider).verify("abc", "NL")
        assert contact is None
        assert reason == RejectionReason.INVALID_PHONE_FORMAT

    @pytest.mark.asyncio
    async def test_other_provider_error(self):
        provider = FakeProvider(lookup_error=ProviderError(2, "Request not allowed"))
        _, reason = await PhoneVerifier(provider).verify("+31612345678", "NL")
        assert reason == RejectionReason.LOOKUP_FAILED

    @pytest.mark.asyncio
    async def test_transport_error(self):
        provider = FakeProvider(lookup_error=ProviderError(None, "timed out"))
        _, reason = await PhoneVerifier(provider).verify("+31612345678", "NL")
        assert reason == RejectionReason.LOOKUP_FAILED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("line_type", ["fixed line", "voip", "unknown", "toll free"])
    async def test_non_mobile_lines(self, line_type):
        provider = FakeProvider(line_type=line_type)
        contact, reason = await PhoneVerifier(provider).verify("+31201234567", "NL")
        assert contact is None
        assert reason == RejectionReason.NOT_MOBILE
