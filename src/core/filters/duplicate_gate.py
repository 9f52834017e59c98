"""
Duplicate detection for uploads.

The gate answers "has this content been stored already?" before any blob
store call is made. It is an optimisation only: the repository's fingerprint
guard is the authority, and a concurrent upload of the same bytes can still
pass the gate and then be rejected at insert time.
"""

from collections.abc import Sequence

from aws_lambda_powertools import Logger

from core.repositories.image_repository import ImageRepository

logger = Logger(UTC=True)


class DuplicateGate:
    """Fingerprint-based duplicate check backed by the image repository."""

    def __init__(self, repository: ImageRepository) -> None:
        self._repository = repository

    def is_duplicate(self, fingerprint: str) -> bool:
        """Return True if a record with this fingerprint is already stored."""
        duplicate = self._repository.fingerprint_exists(fingerprint=fingerprint)
        logger.debug(
            "Duplicate check completed",
            extra={"fingerprint": fingerprint, "is_duplicate": duplicate},
        )
        return duplicate

    @staticmethod
    def split_batch(fingerprints: Sequence[str]) -> tuple[list[int], list[int]]:
        """Separate first occurrences from repeats inside one batch.

        Args:
            fingerprints: Fingerprint of each batch item, in request order

        Returns:
            (indexes of first occurrences, indexes of in-batch repeats)

        Example:
            split_batch(["a", "b", "a"]) → ([0, 1], [2])
        """
        seen: set[str] = set()
        unique: list[int] = []
        repeats: list[int] = []

        for index, fingerprint in enumerate(fingerprints):
            if fingerprint in seen:
                repeats.append(index)
            else:
                seen.add(fingerprint)
                unique.append(index)

        return unique, repeats
