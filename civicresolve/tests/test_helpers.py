"""
Helper, validator and blob store tests.
"""
import io
import re

import pytest
from fastapi import UploadFile

from civicresolve.errors import InvalidInputError
from civicresolve.utils.helpers import to_base36, generate_tracking_id, format_points
from civicresolve.utils.validators import validate_latitude, validate_user_id, is_filter_active


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    encoded = to_base36(1700000000000)
    assert encoded == encoded.upper()
    assert int(encoded, 36) == 1700000000000


def test_tracking_id_format():
    assert re.fullmatch(r"CIV-[0-9A-Z]{8,}-[0-9A-F]{4}", generate_tracking_id())


def test_format_points():
    assert format_points(30) == "+30"
    assert format_points(-5) == "-5"
    assert format_points(0) == "0"


def test_validators():
    assert validate_latitude(45.0) == 45.0
    with pytest.raises(ValueError):
        validate_latitude(91)
    assert validate_user_id("  u1 ") == "u1"
    with pytest.raises(ValueError):
        validate_user_id("")
    assert not is_filter_active("all")
    assert not is_filter_active(None)
    assert is_filter_active("Roads")


# ===================== BLOB STORE =====================


class TestLocalBlobStore:

    @pytest.mark.asyncio
    async def test_save_and_delete(self, photo_store, upload_dir):
        url = await photo_store.save(UploadFile(file=io.BytesIO(b"png-bytes"), filename="leak.PNG"))

        assert re.fullmatch(r"/uploads/\d+-[0-9a-f]{8}\.png", url)
        stored = upload_dir / url.split("/")[-1]
        assert stored.read_bytes() == b"png-bytes"

        photo_store.delete(url)
        assert not stored.exists()

    @pytest.mark.asyncio
    async def test_rejects_oversized(self, upload_dir):
        from civicresolve.services.blob_store import LocalBlobStore

        store = LocalBlobStore(upload_dir=str(upload_dir), max_size=4)
        with pytest.raises(InvalidInputError, match="too large"):
            await store.save(UploadFile(file=io.BytesIO(b"12345"), filename="big.jpg"))

    def test_delete_ignores_remote_and_traversal(self, photo_store, upload_dir, tmp_path_factory):
        outside = tmp_path_factory.mktemp("outside") / "keep.jpg"
        outside.write_bytes(b"x")

        photo_store.delete("https://cdn.example.com/photo.jpg")
        photo_store.delete(f"/uploads/../{outside.parent.name}/keep.jpg")
        photo_store.delete(None)

        assert outside.exists()
