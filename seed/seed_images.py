#!/usr/bin/env python3
"""
Seed script to populate the gallery via the upload endpoint.

Run:
    poetry run python seed/seed_images.py \
      --api-id <API-ID> \
      --images-dir ./seed/images
"""

import argparse
import mimetypes
import sys
from pathlib import Path
from typing import Any, cast

import requests
from aws_lambda_powertools import Logger

logger = Logger(service="seed")

API_BASE_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_"
BATCH_SIZE = 10
IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via the Image Gallery API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="API Gateway ID (e.g. LocalStack API Gateway ID)",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=Path(__file__).parent / "images",
        help="Directory containing the images to upload",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of images to seed",
    )

    return parser.parse_args()


def find_images(images_dir: Path, limit: int | None) -> list[Path]:
    paths = sorted(p for p in images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
    return paths[:limit] if limit is not None else paths


def upload_batch(upload_url: str, paths: list[Path]) -> dict[str, Any]:
    files = [
        (
            "image",
            (path.name, path.read_bytes(), mimetypes.guess_type(path.name)[0] or "application/octet-stream"),
        )
        for path in paths
    ]

    response = requests.post(upload_url, files=files, timeout=60)
    body = cast(dict[str, Any], response.json())

    if response.status_code in (200, 409):
        for result in body.get("results", []):
            logger.info("Seed result", extra=result)
    else:
        logger.error(
            "Failed to seed batch",
            extra={"status": response.status_code, "response": body},
        )

    return body


def seed_images() -> None:
    try:
        args = parse_args()
        base_url = API_BASE_URL.format(args.api_id)
        paths = find_images(args.images_dir, args.limit)

        logger.info(
            "Starting seeding process",
            extra={"api_base_url": base_url, "images": len(paths)},
        )

        for start in range(0, len(paths), BATCH_SIZE):
            upload_batch(f"{base_url}/upload", paths[start : start + BATCH_SIZE])

        logger.info("Seeding completed")

        list_response = requests.get(f"{base_url}/images", params={"pageSize": 5}, timeout=30)
        logger.info(
            "List images response",
            extra={
                "status": list_response.status_code,
                "response": list_response.json() if list_response.ok else list_response.text,
            },
        )

    except (OSError, requests.RequestException, ValueError) as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_images()
