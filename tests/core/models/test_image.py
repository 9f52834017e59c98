import pytest
from pydantic import ValidationError

from core.models.image import Comment, ImageRecord, ListImagesResponse


def make_record(**overrides) -> ImageRecord:
    data = {
        "image_id": "img_1",
        "provider_id": "images/abc.png",
        "url": "https://bucket.s3.us-east-1.amazonaws.com/images/abc.png",
        "fingerprint": "abc",
        "created_at": "2024-01-01T10:00:00.000000+00:00",
    }
    data.update(overrides)
    return ImageRecord(**data)


class TestImageRecord:
    def test_defaults(self) -> None:
        record = make_record()

        assert record.like_count == 0
        assert record.comments == []

    def test_response_is_camel_case_without_internals(self) -> None:
        record = make_record(
            like_count=3,
            comments=[Comment(text="nice", created_at="2024-01-01T10:00:01+00:00")],
        )

        body = record.to_response()

        assert body["id"] == "img_1"
        assert body["likeCount"] == 3
        assert body["createdAt"] == record.created_at
        assert body["comments"][0]["text"] == "nice"
        assert "providerId" not in body
        assert "fingerprint" not in body

    def test_accepts_wire_alias(self) -> None:
        record = ImageRecord.model_validate(
            {
                "id": "img_2",
                "providerId": "k",
                "url": "u",
                "fingerprint": "f",
                "createdAt": "t",
            }
        )
        assert record.image_id == "img_2"

    def test_negative_like_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_record(like_count=-1)


def test_comment_text_required() -> None:
    with pytest.raises(ValidationError):
        Comment(text="", created_at="t")


def test_list_response_aliases() -> None:
    response = ListImagesResponse(
        images=[],
        current_page=5,
        total_pages=2,
        total_count=30,
        page_size=20,
        has_more=False,
        snapshot=None,
    )

    dumped = response.model_dump(by_alias=True)
    assert dumped["currentPage"] == 5
    assert dumped["totalPages"] == 2
    assert dumped["hasMore"] is False
