"""
VideoSDK meeting provider.

Creates a room through the VideoSDK REST API and builds one signed join
link per participant.
"""

import logging
import re
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx
from jose import jwt

from clinicops.config.settings import Settings, get_settings
from clinicops.core.domain import IntegrationException, ValidationException
from clinicops.domains.scheduling.application.ports.meeting_port import IMeetingProvider, MeetingLinks

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
API_TOKEN_TTL = timedelta(minutes=120)
PARTICIPANT_TOKEN_TTL = timedelta(days=30)
PARTICIPANT_PERMISSIONS = ["allow_join", "ask_join", "allow_mod"]
MIN_ROOM_ID_LENGTH = 5

_ROOM_ID_UNSAFE = re.compile(r"[^a-zA-Z0-9-]")


def sanitize_room_id(room_id: str) -> str:
    """Replace characters VideoSDK rejects with '-'."""
    if not room_id or len(room_id) < MIN_ROOM_ID_LENGTH:
        raise ValidationException(
            f"Invalid roomId: must be at least {MIN_ROOM_ID_LENGTH} characters",
            field="room_id",
        )
    return _ROOM_ID_UNSAFE.sub("-", room_id)


class VideoSDKMeetingProvider(IMeetingProvider):
    """
    IMeetingProvider backed by VideoSDK.

    Example:
        ```python
        provider = VideoSDKMeetingProvider()
        links = await provider.create_meeting("appointment-1741590000000-7", 7, 3)
        links.patient_url  # https://app.example/meeting?roomId=...&token=...
        ```
    """

    SERVICE_NAME = "videosdk"

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        if not self.settings.VIDEOSDK_API_KEY or not self.settings.VIDEOSDK_SECRET_KEY:
            raise ValueError("VIDEOSDK_API_KEY and VIDEOSDK_SECRET_KEY must be configured")

        self.api_key: str = self.settings.VIDEOSDK_API_KEY
        self.secret_key: str = self.settings.VIDEOSDK_SECRET_KEY
        self.api_endpoint = self.settings.VIDEOSDK_API_ENDPOINT.rstrip("/")
        self.base_url = self.settings.MEETING_BASE_URL.rstrip("/")
        self.timeout = self.settings.VIDEOSDK_TIMEOUT_SECONDS
        self._http_client = http_client

    def _api_token(self, room_id: str, participant_id: str) -> str:
        """Short-lived token authorizing the room-creation call."""
        payload = {
            "apikey": self.api_key,
            "permissions": ["allow_join"],
            "version": 2,
            "roomId": room_id,
            "participantId": participant_id,
            "exp": datetime.now(UTC) + API_TOKEN_TTL,
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def _participant_token(self, room_id: str, participant_id: str, role: str) -> str:
        """Long-lived token embedded in a participant's join link."""
        payload = {
            "apikey": self.api_key,
            "participantId": participant_id,
            "roomId": room_id,
            "permissions": PARTICIPANT_PERMISSIONS,
            "version": 2,
            "role": role,
            "exp": datetime.now(UTC) + PARTICIPANT_TOKEN_TTL,
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def _join_url(self, room_id: str, token: str) -> str:
        return f"{self.base_url}/meeting?{urlencode({'roomId': room_id, 'token': token})}"

    async def _post_room(self, token: str, room_id: str) -> dict[str, Any]:
        headers = {"Authorization": token, "Content-Type": "application/json"}
        url = f"{self.api_endpoint}/rooms"
        if self._http_client is not None:
            response = await self._http_client.post(url, headers=headers, json={"customRoomId": room_id})
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, headers=headers, json={"customRoomId": room_id})
        response.raise_for_status()
        return response.json()

    async def create_meeting(self, room_id: str, patient_id: int, doctor_id: int) -> MeetingLinks:
        sanitized = sanitize_room_id(room_id)
        try:
            data = await self._post_room(self._api_token(sanitized, str(patient_id)), sanitized)
        except httpx.HTTPStatusError as e:
            logger.error(f"VideoSDK rejected room {sanitized}: {e.response.status_code} {e.response.text}")
            raise IntegrationException(
                self.SERVICE_NAME, f"Failed to create meeting room: {e.response.text}", e
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"VideoSDK request failed for room {sanitized}: {e}")
            raise IntegrationException(self.SERVICE_NAME, f"Error creating meeting: {e}", e) from e

        created_room = data.get("roomId")
        if not created_room:
            raise IntegrationException(self.SERVICE_NAME, "VideoSDK response did not include a roomId")

        return MeetingLinks(
            room_id=created_room,
            patient_url=self._join_url(created_room, self._participant_token(created_room, str(patient_id), "patient")),
            doctor_url=self._join_url(created_room, self._participant_token(created_room, str(doctor_id), "doctor")),
        )
