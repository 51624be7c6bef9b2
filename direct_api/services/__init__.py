"""Service layer for the Direct API."""

from direct_api.services.challenge_service import ChallengeService

__all__ = ["ChallengeService"]
