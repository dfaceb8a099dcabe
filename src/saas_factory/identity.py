"""Caller identity forwarded by the identity gateway."""

from dataclasses import dataclass

from .demo_data import DEMO_USER_EMAIL, DEMO_USER_ID


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str | None = None


DEMO_USER = CurrentUser(id=DEMO_USER_ID, email=DEMO_USER_EMAIL)
