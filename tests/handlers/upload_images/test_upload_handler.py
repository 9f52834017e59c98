import base64
import json
from unittest.mock import patch

from core.models.errors import StorageError
from core.utils.hashing import compute_fingerprint
from handlers.upload_images.handler import handler


def body(response) -> dict:
    return json.loads(response["body"])


class TestUploadHandler:
    def test_upload_multipart_success(
        self,
        aws_resources,
        lambda_context,
        multipart_event,
        sample_image_binary,
        sample_jpeg_binary,
        s3_get_object,
    ) -> None:
        event = multipart_event(
            [
                ("pixel.png", sample_image_binary, "image/png"),
                ("pixel.jpg", sample_jpeg_binary, "image/jpeg"),
            ]
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 200
        payload = body(response)

        assert len(payload["images"]) == 2
        assert [r["status"] for r in payload["results"]] == ["stored", "stored"]

        image = payload["images"][0]
        assert image["id"].startswith("img_")
        assert image["likeCount"] == 0
        assert image["comments"] == []
        assert "fingerprint" not in image

        key = f"images/{compute_fingerprint(sample_image_binary)}.png"
        assert image["url"].endswith(key)
        assert s3_get_object(key) == sample_image_binary

    def test_stored_stored_skipped(self, aws_resources, lambda_context, multipart_event, unique_png) -> None:
        event = multipart_event(
            [
                ("a.png", unique_png(1), "image/png"),
                ("b.png", unique_png(2), "image/png"),
                ("a-again.png", unique_png(1), "image/png"),
            ]
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 200
        payload = body(response)
        assert [r["status"] for r in payload["results"]] == ["stored", "stored", "skipped"]
        assert len(payload["images"]) == 2

    def test_all_duplicates_is_conflict(self, aws_resources, lambda_context, multipart_event, unique_png) -> None:
        handler(multipart_event([("a.png", unique_png(1), "image/png")]), lambda_context)

        response = handler(multipart_event([("a.png", unique_png(1), "image/png")]), lambda_context)

        assert response["statusCode"] == 409
        payload = body(response)
        assert payload["error"] == "ALL_DUPLICATES"
        assert payload["results"][0]["reason"] == "duplicate"

    def test_json_upload(self, aws_resources, lambda_context, sample_image_binary) -> None:
        event = {
            "httpMethod": "POST",
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps(
                {
                    "images": [
                        {
                            "file": base64.b64encode(sample_image_binary).decode(),
                            "image_name": "pixel.png",
                        }
                    ]
                }
            ),
        }

        response = handler(event, lambda_context)

        assert response["statusCode"] == 200
        assert body(response)["images"][0]["imageName"] == "pixel.png"

    def test_no_files(self, aws_resources, lambda_context, multipart_event, unique_png) -> None:
        event = multipart_event([("a.png", unique_png(1), "image/png")], field_name="attachment")

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert body(response)["error"] == "NO_FILES"

    def test_too_many_files(self, aws_resources, lambda_context, multipart_event, unique_png) -> None:
        files = [(f"{i}.png", unique_png(i), "image/png") for i in range(11)]

        response = handler(multipart_event(files), lambda_context)

        assert response["statusCode"] == 400
        assert body(response)["error"] == "TOO_MANY_FILES"

    def test_malformed_multipart(self, aws_resources, lambda_context) -> None:
        event = {
            "httpMethod": "POST",
            "headers": {"Content-Type": "multipart/form-data"},
            "body": "garbage",
        }

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400

    def test_invalid_json(self, aws_resources, lambda_context) -> None:
        event = {"httpMethod": "POST", "headers": {}, "body": "{not-json"}

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert body(response)["message"] == "Invalid JSON body"

    def test_invalid_base64(self, aws_resources, lambda_context) -> None:
        event = {
            "httpMethod": "POST",
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"images": [{"file": "%%%", "image_name": "x.png"}]}),
        }

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert body(response)["error"] == "VALIDATION_FAILED"

    def test_only_unsupported_files_is_bad_request(self, aws_resources, lambda_context, multipart_event) -> None:
        response = handler(multipart_event([("notes.txt", b"hello", "text/plain")]), lambda_context)

        assert response["statusCode"] == 400
        assert body(response)["results"][0]["reason"] == "unsupported_type"

    def test_nothing_stored_because_of_storage_failure(
        self,
        aws_resources,
        lambda_context,
        multipart_event,
        unique_png,
    ) -> None:
        with patch(
            "handlers.upload_images.service.S3BlobStore.put",
            side_effect=StorageError(message="Unable to upload image at this time"),
        ):
            response = handler(multipart_event([("a.png", unique_png(1), "image/png")]), lambda_context)

        assert response["statusCode"] == 500
        payload = body(response)
        assert payload["error"] == "UPLOAD_FAILED"
        assert payload["results"][0]["reason"] == "upload_failed"

    def test_options_preflight(self, lambda_context) -> None:
        response = handler({"httpMethod": "OPTIONS"}, lambda_context)

        assert response["statusCode"] == 204
