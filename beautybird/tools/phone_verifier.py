"""
Phone number verification via the provider's lookup API.

Classifies a raw, user-entered number into one of four outcomes: a mobile
line (with the provider-normalized number), an unrecognized format, a
valid but non-mobile line, or a lookup that failed for another reason.
Provider error shapes never leave this module.
"""

from typing import Optional

from beautybird.logging_context import get_booking_logger, mask_phone
from beautybird.providers.messagebird import MessagingProvider, ProviderError
from beautybird.schemas.booking_schema import LineType, RejectionReason, VerifiedContact

logger = get_booking_logger(__name__)


class PhoneVerifier:
    """Wraps the provider lookup and maps its answers to booking outcomes."""

    def __init__(self, provider: MessagingProvider) -> None:
        self._provider = provider

    async def verify(
        self, raw_number: str, country_code: Optional[str]
    ) -> tuple[Optional[VerifiedContact], Optional[RejectionReason]]:
        """Return ``(contact, None)`` for a mobile line, else ``(None, reason)``."""
        try:
            result = await self._provider.lookup(raw_number, country_code)
        except ProviderError as e:
            if e.is_unknown_format:
                logger.info("Lookup rejected %s: unknown format", mask_phone(raw_number))
                return None, RejectionReason.INVALID_PHONE_FORMAT
            logger.warning("Lookup failed for %s: %s", mask_phone(raw_number), e)
            return None, RejectionReason.LOOKUP_FAILED

        line_type = LineType.from_provider(result.line_type)
        if line_type is not LineType.MOBILE:
            logger.info(
                "Number %s is a %s line, not mobile",
                mask_phone(result.phone_number), result.line_type,
            )
            return None, RejectionReason.NOT_MOBILE

        logger.debug("Verified mobile number %s", mask_phone(result.phone_number))
        return VerifiedContact(
            normalized_phone_number=result.phone_number, line_type=line_type
        ), None
