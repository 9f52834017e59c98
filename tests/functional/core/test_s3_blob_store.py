"""S3BlobStore against moto's S3."""

from core.infrastructure.aws.s3_blob_store import S3BlobStore
from core.utils.hashing import compute_fingerprint


def test_put_stores_bytes_under_fingerprint_key(s3_bucket, s3_get_object, sample_image_binary) -> None:
    fingerprint = compute_fingerprint(sample_image_binary)

    receipt = S3BlobStore().put(
        fingerprint=fingerprint,
        file_data=sample_image_binary,
        mime_type="image/png",
    )

    assert receipt.provider_id == f"images/{fingerprint}.png"
    assert receipt.url.endswith(receipt.provider_id)
    assert receipt.etag and '"' not in receipt.etag
    assert s3_get_object(receipt.provider_id) == sample_image_binary


def test_same_bytes_target_same_object(s3_bucket, sample_image_binary) -> None:
    store = S3BlobStore()
    fingerprint = compute_fingerprint(sample_image_binary)

    first = store.put(fingerprint=fingerprint, file_data=sample_image_binary, mime_type="image/png")
    second = store.put(fingerprint=fingerprint, file_data=sample_image_binary, mime_type="image/png")

    assert first.provider_id == second.provider_id
    listing = s3_bucket.list_objects_v2(Bucket=store._s3.bucket_name)
    assert listing["KeyCount"] == 1
