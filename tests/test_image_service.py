from pathlib import Path

import pytest
from PIL import Image

from conftest import make_image_bytes
from image_converter.models.errors import DecodeError
from image_converter.services.image_service import ImageService


def create_temp_file(tmp_path: Path, name: str, data: bytes) -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


def test_read_input_classifies_by_name(tmp_path):
    data = make_image_bytes(fmt="PNG")
    path = create_temp_file(tmp_path, "cat.png", data)

    item = ImageService().read_input(path)

    assert item.name == "cat.png"
    assert item.data == data
    assert item.size == len(data)
    assert item.mime_type == "image/png"


def test_read_input_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ImageService().read_input(tmp_path / "missing.png")


def test_split_images_rejects_non_images(tmp_path):
    png = create_temp_file(tmp_path, "a.png", make_image_bytes())
    jpg = create_temp_file(tmp_path, "b.jpg", make_image_bytes(fmt="JPEG"))
    txt = create_temp_file(tmp_path, "notes.txt", b"hello")
    svg = create_temp_file(tmp_path, "logo.svg", b"<svg/>")

    images, rejected = ImageService().split_images([png, txt, jpg, svg])

    assert [i.name for i in images] == ["a.png", "b.jpg"]
    assert rejected == ["notes.txt", "logo.svg"]


def test_decode_returns_loaded_image():
    img = ImageService().decode(make_image_bytes(size=(12, 7)))

    assert isinstance(img, Image.Image)
    assert img.size == (12, 7)
    assert img.mode in ("RGB", "RGBA")


def test_decode_garbage_raises():
    with pytest.raises(DecodeError, match="не является изображением"):
        ImageService().decode(b"definitely not an image")


def test_decode_truncated_raises():
    data = make_image_bytes(size=(200, 200), fmt="JPEG")

    with pytest.raises(DecodeError):
        ImageService().decode(data[: len(data) // 3])
