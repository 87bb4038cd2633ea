"""
Domain errors raised by the services and translated to HTTP responses by the routers
"""


class SocialFeedError(Exception):
    """Base class for every error the services raise"""


class DataAccessError(SocialFeedError):
    """A read or write against the database failed"""


class StorageError(SocialFeedError):
    """An object storage upload or lookup failed"""


class ValidationError(SocialFeedError):
    """Input rejected before any database or storage call"""


class EmptyPostError(ValidationError):
    def __init__(self):
        super().__init__("Post must have text content or an image")


class EmptyContentError(ValidationError):
    def __init__(self, what: str = "Content"):
        super().__init__(f"{what} cannot be empty")


class InvalidImageError(ValidationError):
    pass


class PostNotFoundError(SocialFeedError):
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


class NotPostOwnerError(SocialFeedError):
    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Only the author can modify post {post_id}")


class DuplicateRowError(DataAccessError):
    """A write violated a table constraint (duplicate key or missing parent row)"""
