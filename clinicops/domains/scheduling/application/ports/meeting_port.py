"""
Online Meeting Ports

Video room provisioning and delivery of meeting links.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class MeetingLinks:
    """Join URLs for both sides of an online consultation."""

    room_id: str
    patient_url: str
    doctor_url: str


@runtime_checkable
class IMeetingProvider(Protocol):
    """Video room provider interface."""

    async def create_meeting(self, room_id: str, patient_id: int, doctor_id: int) -> MeetingLinks:
        """
        Create a room and one join link per participant.

        Args:
            room_id: Requested room identifier (at least 5 characters)
            patient_id: Patient user ID
            doctor_id: Doctor ID

        Returns:
            MeetingLinks for patient and doctor

        Raises:
            IntegrationException: the provider could not create the room
        """
        ...


@runtime_checkable
class IMeetingNotifier(Protocol):
    """Delivers meeting links to participants."""

    async def send_meeting_link(self, email: str, meeting_url: str) -> None:
        """
        Send the meeting link to one participant.

        Args:
            email: Recipient address
            meeting_url: Join URL for that recipient
        """
        ...
