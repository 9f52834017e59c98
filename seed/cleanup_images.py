#!/usr/bin/env python3
"""
Cleanup script to empty a sandbox gallery (LocalStack).

The API has no delete endpoint, so this talks to the backing stores directly.

Run:
    poetry run python seed/cleanup_images.py \
      --bucket image-gallery-images-snd \
      --table image-gallery-metadata-snd
"""

import argparse
import sys

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

logger = Logger(service="cleanup")

DEFAULT_ENDPOINT_URL = "http://localhost:4566"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove all gallery data from a sandbox")

    parser.add_argument("--bucket", required=True, help="Image S3 bucket name")
    parser.add_argument("--table", required=True, help="Image metadata DynamoDB table name")
    parser.add_argument(
        "--endpoint-url",
        default=DEFAULT_ENDPOINT_URL,
        help="AWS endpoint (LocalStack by default)",
    )

    return parser.parse_args()


def cleanup_bucket(bucket: str, endpoint_url: str) -> int:
    s3 = boto3.client("s3", endpoint_url=endpoint_url)
    deleted = 0

    for page in s3.get_paginator("list_objects_v2").paginate(Bucket=bucket):
        objects = [{"Key": obj["Key"]} for obj in page.get("Contents", [])]
        if objects:
            s3.delete_objects(Bucket=bucket, Delete={"Objects": objects})
            deleted += len(objects)

    return deleted


def cleanup_table(table_name: str, endpoint_url: str) -> int:
    """Delete image records, fingerprint guards and likes alike."""
    table = boto3.resource("dynamodb", endpoint_url=endpoint_url).Table(table_name)
    scan_kwargs: dict = {"ProjectionExpression": "pk"}
    deleted = 0

    while True:
        response = table.scan(**scan_kwargs)

        with table.batch_writer() as batch:
            for item in response.get("Items", []):
                batch.delete_item(Key={"pk": item["pk"]})
                deleted += 1

        start_key = response.get("LastEvaluatedKey")
        if not start_key:
            return deleted
        scan_kwargs["ExclusiveStartKey"] = start_key


def cleanup_images() -> None:
    try:
        args = parse_args()

        logger.info(
            "Starting cleanup process",
            extra={"bucket": args.bucket, "table": args.table, "endpoint_url": args.endpoint_url},
        )

        objects = cleanup_bucket(args.bucket, args.endpoint_url)
        items = cleanup_table(args.table, args.endpoint_url)

        logger.info("Cleanup completed successfully", extra={"objects": objects, "items": items})

    except (BotoCoreError, ClientError) as exc:
        logger.exception("Cleanup failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    cleanup_images()
