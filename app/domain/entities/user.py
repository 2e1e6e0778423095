"""Domain entity representing a user."""

from dataclasses import dataclass


@dataclass
class User:
    """Attributes of an application user needed for notifications."""

    id: int
    name: str
    email: str
    is_active: bool = True
