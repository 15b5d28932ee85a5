"""
Tests for the batch conversion pipeline.

Batches are driven with asyncio.run; images are synthesised in memory.
"""

import asyncio
import io

import pytest
from PIL import Image

from conftest import make_image_bytes, make_input
from image_converter.models.errors import DecodeError, EncodeError, InvalidInputError
from image_converter.models.image_model import ConversionConfig, Dimensions, InputImage, OutputFormat
from image_converter.services.conversion_service import (
    ConversionService,
    compression_ratio_percent,
    convert_batch,
    derive_output_name,
    run_batch,
)


def _open(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


class TestDeriveOutputName:
    @pytest.mark.parametrize(
        "name,fmt,expected",
        [
            ("photo.png", OutputFormat.JPEG, "photo.jpeg"),
            ("archive.tar.gz", OutputFormat.PNG, "archive.tar.png"),
            ("IMG_0001.JPG", OutputFormat.WEBP, "IMG_0001.webp"),
            ("no_extension", OutputFormat.PNG, "no_extension.png"),
            (".hidden", OutputFormat.BMP, ".hidden.bmp"),
        ],
    )
    def test_extension_replaced(self, name, fmt, expected):
        assert derive_output_name(name, fmt) == expected


class TestCompressionRatio:
    def test_sixty_percent(self):
        assert compression_ratio_percent(1_000_000, 400_000) == 60.0

    def test_negative_when_output_grows(self):
        assert compression_ratio_percent(1000, 1500) == -50.0

    def test_one_decimal(self):
        assert compression_ratio_percent(3, 2) == 33.3

    @pytest.mark.parametrize("original,processed,expected", [(400, 399, 0.3), (80, 79, 1.3), (400, 401, -0.3)])
    def test_ties_round_away_from_zero(self, original, processed, expected):
        assert compression_ratio_percent(original, processed) == expected

    def test_zero_byte_original(self):
        assert compression_ratio_percent(0, 10) == 0.0


class TestConvertBatch:
    def test_results_follow_input_order(self):
        inputs = [make_input(name=f"img{i}.png", size=(20 + i, 10)) for i in range(4)]

        results = asyncio.run(convert_batch(inputs, ConversionConfig(target_format=OutputFormat.PNG)))

        assert len(results) == len(inputs)
        for item, result in zip(inputs, results):
            assert result.original_name == item.name
            assert result.original_size == item.size
        assert [r.output_dimensions.width for r in results] == [20, 21, 22, 23]

    def test_result_metadata(self, png_input):
        result = run_batch([png_input], ConversionConfig(target_format=OutputFormat.WEBP, quality=0.5))[0]

        assert result.processed_name == "photo.webp"
        assert result.output_format == "WEBP"
        assert result.processed_size == len(result.processed_data)
        assert result.output_dimensions == Dimensions(40, 30)
        assert result.compression_ratio_percent == compression_ratio_percent(
            png_input.size, result.processed_size
        )
        assert _open(result.processed_data).format == "WEBP"

    def test_result_ids_are_unique(self):
        inputs = [make_input(name="a.png"), make_input(name="a.png")]

        results = run_batch(inputs, ConversionConfig())

        assert results[0].result_id != results[1].result_id

    def test_empty_batch_is_invalid(self):
        with pytest.raises(InvalidInputError):
            run_batch([], ConversionConfig())

    def test_non_raster_item_is_invalid(self):
        inputs = [make_input(), InputImage(name="notes.txt", data=b"hello", mime_type="text/plain")]

        with pytest.raises(InvalidInputError) as exc_info:
            run_batch(inputs, ConversionConfig())

        assert exc_info.value.index == 1
        assert exc_info.value.original_name == "notes.txt"

    def test_undecodable_item_aborts_batch(self):
        progress = []
        inputs = [
            make_input(name="ok.png"),
            InputImage(name="broken.png", data=b"\x89PNG not really", mime_type="image/png"),
            make_input(name="never.png"),
        ]

        with pytest.raises(DecodeError) as exc_info:
            run_batch(inputs, ConversionConfig(), on_progress=lambda *args: progress.append(args))

        assert exc_info.value.index == 1
        assert exc_info.value.original_name == "broken.png"
        assert isinstance(exc_info.value.__cause__, Exception)
        # only the first item completed before the failure
        assert progress == [(1, 3, "ok.png")]

    def test_progress_reported_per_image(self):
        progress = []
        inputs = [make_input(name="a.png"), make_input(name="b.png")]

        run_batch(inputs, ConversionConfig(), on_progress=lambda *args: progress.append(args))

        assert progress == [(1, 2, "a.png"), (2, 2, "b.png")]

    def test_png_target_ignores_quality(self, png_input):
        result = run_batch([png_input], ConversionConfig(target_format=OutputFormat.PNG, quality=0.0))[0]

        assert _open(result.processed_data).format == "PNG"

    def test_png_keeps_alpha(self):
        item = make_input(name="a.png", mode="RGBA", color=(10, 20, 30, 100))

        result = run_batch([item], ConversionConfig(target_format=OutputFormat.PNG))[0]

        assert _open(result.processed_data).mode == "RGBA"

    @pytest.mark.parametrize("fmt", [OutputFormat.JPEG, OutputFormat.BMP])
    def test_alpha_flattened_for_formats_without_alpha(self, fmt):
        item = make_input(name="a.png", mode="RGBA", color=(10, 20, 30, 100))

        result = run_batch([item], ConversionConfig(target_format=fmt))[0]

        assert _open(result.processed_data).mode == "RGB"

    def test_palette_and_grayscale_inputs(self):
        gif = InputImage(name="anim.gif", data=make_image_bytes(fmt="GIF", mode="P", color=1), mime_type="image/gif")
        gray = make_input(name="gray.png", mode="L", color=128)

        results = run_batch([gif, gray], ConversionConfig(target_format=OutputFormat.JPEG))

        assert [r.processed_name for r in results] == ["anim.jpeg", "gray.jpeg"]

    def test_exif_orientation_applied(self):
        img = Image.new("RGB", (60, 20), color="blue")
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 CW on display
        buffer = io.BytesIO()
        img.save(buffer, format="JPEG", exif=exif.tobytes())
        item = InputImage(name="rotated.jpg", data=buffer.getvalue(), mime_type="image/jpeg")

        result = run_batch([item], ConversionConfig(target_format=OutputFormat.PNG))[0]

        assert result.output_dimensions == Dimensions(20, 60)

    def test_encode_failure_is_reported(self, monkeypatch, png_input):
        service = ConversionService()

        def broken_save(self, fp, format=None, **params):
            raise OSError("encoder not available")

        monkeypatch.setattr(Image.Image, "save", broken_save)

        with pytest.raises(EncodeError) as exc_info:
            service.run_batch([png_input], ConversionConfig(target_format=OutputFormat.WEBP))

        assert exc_info.value.index == 0
        assert "WEBP" in exc_info.value.message

    def test_reconversion_keeps_dimensions(self):
        first = run_batch([make_input(size=(300, 200))], ConversionConfig(max_width=120))[0]
        again_input = InputImage(name=first.processed_name, data=first.processed_data, mime_type="image/jpeg")

        second = run_batch([again_input], ConversionConfig())[0]

        assert first.output_dimensions == Dimensions(120, 80)
        assert second.output_dimensions == first.output_dimensions

    def test_end_to_end_large_jpeg(self):
        original = InputImage(
            name="holiday.png",
            data=make_image_bytes(size=(4000, 3000), fmt="JPEG", color=(90, 140, 200)),
            mime_type="image/jpeg",
        )
        config = ConversionConfig(target_format=OutputFormat.JPEG, quality=0.8, max_width=800)

        results = run_batch([original], config)

        assert len(results) == 1
        result = results[0]
        assert result.output_dimensions == Dimensions(800, 600)
        assert result.output_format == "JPEG"
        assert result.processed_size < result.original_size
        assert result.processed_name == "holiday.jpeg"
        assert _open(result.processed_data).size == (800, 600)


class TestRender:
    def test_render_scales_to_exact_target(self):
        service = ConversionService()
        img = Image.new("RGB", (101, 33))

        rendered = service.render(img, Dimensions(50, 17))

        assert rendered.size == (50, 17)

    def test_render_same_size_is_noop(self):
        service = ConversionService()
        img = Image.new("RGB", (10, 10))

        assert service.render(img, Dimensions(10, 10)) is img
