"""Participant allow-list for NuvoLock."""

from nuvolock.participants.registry import ParticipantRegistry

__all__ = ["ParticipantRegistry"]
