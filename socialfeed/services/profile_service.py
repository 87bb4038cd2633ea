from typing import Dict, Iterable, Optional
import logging

from socialfeed.db.client import DataClient
from socialfeed.models.profile import Profile
from socialfeed.utils.joins import distinct, index_by

logger = logging.getLogger(__name__)

class ProfileService:
    """Read-only access to profiles; rows are created by the identity provider"""

    def __init__(self, client: DataClient):
        self.client = client

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        return await self.client.get(Profile, user_id=user_id)

    async def profiles_by_id(self, user_ids: Iterable[str]) -> Dict[str, Profile]:
        """Fetch the distinct profiles for user_ids, keyed by user id"""
        profiles = await self.client.select_in(Profile, "user_id", distinct(user_ids))
        return index_by(profiles, "user_id")
