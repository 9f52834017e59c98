"""
Business logic for commenting on images.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_image_repository import DynamoDBImageRepository
from core.models.image import Comment
from core.repositories.image_repository import ImageRepository

logger = Logger(UTC=True)


class CommentService:
    """Application service appending comments to images."""

    def __init__(self, repository: ImageRepository | None = None) -> None:
        self.repository = repository or DynamoDBImageRepository()

    def add_comment(self, *, image_id: str, text: str, author: str | None = None) -> Comment:
        """Append a comment; comments keep their arrival order.

        Raises:
            ValidationError: If ``text`` is empty
            NotFoundError: If the image does not exist
            DatabaseError: If the write fails
        """
        comment = self.repository.append_comment(image_id=image_id, text=text, author=author or None)
        logger.debug("Comment appended", extra={"image_id": image_id})
        return comment
