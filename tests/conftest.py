import io

import pytest
from PIL import Image

from image_converter.models.image_model import InputImage


def make_image_bytes(size=(40, 30), fmt="PNG", color=(200, 30, 30), mode="RGB") -> bytes:
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_input(name="photo.png", size=(40, 30), fmt="PNG", mime_type="image/png", **kwargs) -> InputImage:
    return InputImage(name=name, data=make_image_bytes(size=size, fmt=fmt, **kwargs), mime_type=mime_type)


@pytest.fixture
def png_input():
    return make_input()
