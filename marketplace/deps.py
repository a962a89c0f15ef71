# marketplace/deps.py
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from .db import get_session
from .errors import Unauthenticated
from .ledger import find_profile
from .tables import Profile


async def get_profile(
    profile_id: Optional[str] = Header(default=None, convert_underscores=False),
    session: AsyncSession = Depends(get_session),
) -> Profile:
    """Resolve the ``profile_id`` header to the acting profile."""
    if not profile_id or not profile_id.strip().isdigit():
        raise Unauthenticated()
    profile = await find_profile(session, int(profile_id))
    if profile is None:
        raise Unauthenticated()
    return profile
