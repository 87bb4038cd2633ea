from typing import Optional
import logging

from socialfeed.db.client import DataClient
from socialfeed.models.post import Post
from socialfeed.services.session_service import Session
from socialfeed.services.storage_service import ImageUpload, StorageService
from socialfeed.utils.exceptions import DataAccessError, EmptyPostError

logger = logging.getLogger(__name__)

class PostComposer:
    def __init__(self, client: DataClient, storage: StorageService):
        self.client = client
        self.storage = storage

    async def submit(
        self,
        session: Session,
        content: Optional[str],
        image: Optional[ImageUpload] = None
    ) -> Post:
        """Create a post from text and an optional image.

        Nothing is written when both are empty. The image is uploaded first and
        a failed upload aborts the submission, so a post never loses its image.
        """
        text = (content or "").strip()
        if not text and image is None:
            raise EmptyPostError()

        image_url = None
        object_name = None
        if image is not None:
            self.storage.validate(image)
            object_name = self.storage.object_name(session.user_id, image)
            await self.storage.upload(object_name, image.data)
            image_url = self.storage.public_url(object_name)

        try:
            post = await self.client.insert(
                Post,
                content=text,
                image_url=image_url,
                user_id=session.user_id
            )
        except DataAccessError:
            if object_name is not None:
                await self.storage.remove(object_name)
            raise

        logger.info(f"User {session.user_id} created post {post.id}")
        return post
