"""Repository package exposing persistence-layer access for the identity model."""

from __future__ import annotations

from vidshare.repositories.base import BaseRepository
from vidshare.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
