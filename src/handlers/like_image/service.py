"""
Business logic for liking images.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_image_repository import DynamoDBImageRepository
from core.models.errors import ValidationError
from core.repositories.image_repository import ImageRepository

logger = Logger(UTC=True)


class LikeService:
    """Application service recording one like per image and source."""

    def __init__(self, repository: ImageRepository | None = None) -> None:
        self.repository = repository or DynamoDBImageRepository()

    def like(self, *, image_id: str, source_identity: str) -> None:
        """Record a like from ``source_identity``.

        Raises:
            ValidationError: If ``image_id`` is blank
            AlreadyLikedError: If this source already liked the image
            NotFoundError: If the image does not exist
            DatabaseError: If the write fails
        """
        if not image_id:
            raise ValidationError(message="Image id is required")

        logger.debug("Liking image", extra={"image_id": image_id, "source": source_identity})
        self.repository.increment_like(image_id=image_id, source_identity=source_identity)
