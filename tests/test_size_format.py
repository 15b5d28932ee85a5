import pytest

from image_converter.services.size_format import format_file_size


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1_048_576, "1 MB"),
        (5 * 1024**3, "5 GB"),
        (1234567, "1.18 MB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        format_file_size(-1)
