# relaypanel/domain/services/expiry_service.py

"""
Domain service for client expiration.

Maps an expiration preset to an absolute instant. Month and year presets
use calendar arithmetic that clamps to the last day of the target month,
so Jan 31 + 1 month is Feb 28 (or 29) and Feb 29 + 1 year is Feb 28.
"""

import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from relaypanel.domain.exceptions import InvalidInputException
from relaypanel.domain.models.client_domain_model import Client

PRESET_7_DAYS = "7d"
PRESET_1_MONTH = "1m"
PRESET_3_MONTHS = "3m"
PRESET_6_MONTHS = "6m"
PRESET_1_YEAR = "1y"
PRESET_NEVER = "never"
PRESET_CUSTOM = "custom"

MONTH_PRESETS = {
    PRESET_1_MONTH: 1,
    PRESET_3_MONTHS: 3,
    PRESET_6_MONTHS: 6,
    PRESET_1_YEAR: 12,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_instant(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 instant. Naive values are taken as UTC.

    Returns:
        Aware datetime, or None if the value cannot be parsed
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class ExpiryService:
    """
    Domain service for expiration presets and expiry checks.
    """

    @staticmethod
    def compute_expires_at(
            expires_preset: Optional[str],
            custom_expires_at: Union[str, datetime, None] = None,
            now: Optional[datetime] = None,
    ) -> Optional[datetime]:
        """
        Compute the absolute expiration instant for a preset.

        Args:
            expires_preset: One of 7d, 1m, 3m, 6m, 1y, never, custom.
                Unrecognized values mean never.
            custom_expires_at: Explicit instant, required for custom
            now: Reference time (defaults to the current UTC time)

        Returns:
            Expiration instant, or None for never

        Raises:
            InvalidInputException: If custom is missing, unparseable or not in the future
        """
        now = now or utcnow()

        if expires_preset == PRESET_7_DAYS:
            return now + timedelta(days=7)

        if expires_preset in MONTH_PRESETS:
            return add_months(now, MONTH_PRESETS[expires_preset])

        if expires_preset == PRESET_CUSTOM:
            if custom_expires_at is None or (isinstance(custom_expires_at, str) and not custom_expires_at.strip()):
                raise InvalidInputException(detail="Custom expiration date is required")
            custom_date = parse_instant(custom_expires_at)
            if custom_date is None:
                raise InvalidInputException(detail="Invalid custom expiration date")
            if custom_date <= now:
                raise InvalidInputException(detail="Custom expiration date must be in the future")
            return custom_date

        return None

    @staticmethod
    def is_expired(client: Client, now: Optional[datetime] = None) -> bool:
        """A client is expired iff it has an expiration at or before now."""
        if client.expires_at is None:
            return False
        return client.expires_at <= (now or utcnow())
