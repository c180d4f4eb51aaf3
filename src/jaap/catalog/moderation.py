"""Submission of user mantras to the Airtable moderation table."""

import logging
from datetime import datetime, timezone

import httpx

from .models import MantraEntry

logger = logging.getLogger(__name__)

AIRTABLE_API_URL = "https://api.airtable.com/v0"


class ModerationClient:
    """Posts user entries to a "User_Submissions" table for review."""

    def __init__(
        self,
        base_id: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_id = base_id
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def submissions_url(self) -> str:
        return f"{AIRTABLE_API_URL}/{self.base_id}/User_Submissions"

    async def submit(self, entry: MantraEntry) -> bool:
        """Submit an entry for review.

        Returns:
            True if the table accepted the record, False on any failure
        """
        fields = {
            "Name": entry.name,
            "Sanskrit": entry.sanskrit,
            "Gurmukhi": entry.gurmukhi,
            "Translation": entry.translation,
            "Category": entry.category,
            "Traditional Count": entry.traditional_count,
            "Submitted By": entry.submitted_by or "Anonymous",
            "Submitted At": datetime.now(timezone.utc).isoformat(),
            "Status": "Pending Review",
        }
        payload = {"fields": {k: v for k, v in fields.items() if v is not None}}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.submissions_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Error submitting mantra for review: {e}")
            return False

        if response.is_error:
            logger.error(
                f"Moderation submission for '{entry.name}' rejected: "
                f"{response.status_code}"
            )
            return False
        return True
