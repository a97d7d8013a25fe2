"""
Tests for MediaStorageService.

Covers:
- save_upload writes under MEDIA_ROOT/{user_id} and returns a public URL
- Size limit
- Filename sanitising
- normalize_inputs walks nested inputs and swaps uploads for URLs
"""

from io import BytesIO

import pytest
from starlette.datastructures import UploadFile

from src.domain.shared.exceptions import UploadTooLargeError
from src.infrastructure.file_storage import MediaStorageService


@pytest.fixture
def storage(tmp_path):
    return MediaStorageService(
        media_root=str(tmp_path), base_url="http://media.test/media/", max_size_mb=1
    )


def test_save_upload_writes_file_and_returns_url(storage, tmp_path):
    url = storage.save_upload(5, "face.png", b"png-bytes")

    assert url.startswith("http://media.test/media/5/")
    assert url.endswith("_face.png")
    stored = tmp_path / "5" / url.rsplit("/", 1)[-1]
    assert stored.read_bytes() == b"png-bytes"


def test_save_upload_rejects_large_files(storage, tmp_path):
    with pytest.raises(UploadTooLargeError):
        storage.save_upload(5, "big.bin", b"x" * (1024 * 1024 + 1))

    assert not (tmp_path / "5").exists()


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("../../etc/passwd", "passwd"),
        ("my photo (1).jpg", "my_photo_1_.jpg"),
        ("", "upload"),
        ("...", "upload"),
    ],
)
def test_safe_filename(filename, expected):
    assert MediaStorageService._safe_filename(filename) == expected


@pytest.mark.asyncio
async def test_normalize_inputs_replaces_nested_uploads(storage):
    upload = UploadFile(file=BytesIO(b"img"), filename="ref.png")
    extra = UploadFile(file=BytesIO(b"img2"), filename="mask.png")

    result = await storage.normalize_inputs(
        5, {"prompt": "cat", "image": upload, "masks": [extra, "keep"], "scale": 2}
    )

    assert result["prompt"] == "cat"
    assert result["scale"] == 2
    assert result["image"].startswith("http://media.test/media/5/")
    assert result["masks"][0].endswith("_mask.png")
    assert result["masks"][1] == "keep"


@pytest.mark.asyncio
async def test_normalize_inputs_propagates_size_errors(storage):
    upload = UploadFile(file=BytesIO(b"x" * (1024 * 1024 + 1)), filename="big.png")

    with pytest.raises(UploadTooLargeError):
        await storage.normalize_inputs(5, {"image": upload})
