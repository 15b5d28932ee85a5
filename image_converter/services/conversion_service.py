"""Пакетное преобразование: декодирование → ресайз → кодирование → метаданные.

Принципы:
- SRP: сервис оркестрирует шаги и собирает `ConversionResult`; состояние между
  вызовами не хранится, накопление файлов — забота вызывающей стороны.
- Последовательность: изображения обрабатываются строго по одному; декодирование
  и кодирование выполняются вне цикла событий и ожидаются по очереди.
"""
from __future__ import annotations

import asyncio
import io
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence

from PIL import Image

from image_converter.config import RESAMPLE_FILTER
from image_converter.logger import get_logger
from image_converter.models.errors import ConversionError, EncodeError, InvalidInputError
from image_converter.models.image_model import (
    ConversionConfig,
    ConversionResult,
    Dimensions,
    InputImage,
    OutputFormat,
)
from image_converter.services.dimension_service import compute_bounded
from image_converter.services.image_service import ImageService

logger = get_logger("conversion_service")

ProgressCallback = Callable[[int, int, str], None]


def derive_output_name(original_name: str, target_format: OutputFormat) -> str:
    """Заменяет последнее расширение на каноническое расширение формата.

    Имя без расширения (или вида ".hidden") сохраняется целиком, расширение дописывается.
    """
    stem, dot, _ext = original_name.rpartition(".")
    if not dot or not stem:
        stem = original_name
    return f"{stem}.{target_format.extension}"


def compression_ratio_percent(original_size: int, processed_size: int) -> float:
    """Процент уменьшения размера с одним знаком; отрицателен, если файл вырос.

    Половины округляются от нуля: 0.25 -> 0.3, -0.25 -> -0.3.
    """
    if original_size <= 0:
        return 0.0
    ratio = (original_size - processed_size) / original_size * 100
    return float(Decimal(ratio).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class ConversionService:
    def __init__(self, image_service: Optional[ImageService] = None) -> None:
        self._image_service = image_service or ImageService()
        self._resample = getattr(Image.Resampling, RESAMPLE_FILTER)

    # ---- Public API ----
    async def convert_batch(
        self,
        inputs: Sequence[InputImage],
        config: ConversionConfig,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[ConversionResult]:
        """Преобразует все входные файлы по одной конфигурации.

        Args:
            inputs: Упорядоченные входные изображения.
            config: Параметры запуска.
            on_progress: Необязательный колбэк (готово, всего, имя) после каждого файла.

        Returns:
            Список результатов в порядке входа.

        Raises:
            InvalidInputError: пустой батч или не растровый элемент.
            DecodeError / EncodeError: ошибка на конкретном элементе; батч прерывается целиком.
        """
        if not inputs:
            raise InvalidInputError("Нет изображений для обработки")

        total = len(inputs)
        logger.info(
            "Converting %d image(s) to %s (quality=%d%%, max=%sx%s)",
            total,
            config.target_format.pil_format,
            config.quality_percent,
            config.max_width or "-",
            config.max_height or "-",
        )

        results: List[ConversionResult] = []
        for index, item in enumerate(inputs):
            try:
                result = await self._convert_one(item, config)
            except ConversionError as exc:
                exc.index = index
                exc.original_name = item.name
                logger.warning("Batch aborted at item %d (%s): %s", index, item.name, exc.message)
                raise
            results.append(result)
            if on_progress:
                on_progress(index + 1, total, item.name)

        logger.info("Converted %d image(s)", len(results))
        return results

    def run_batch(
        self,
        inputs: Sequence[InputImage],
        config: ConversionConfig,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[ConversionResult]:
        """Синхронная обёртка над `convert_batch` для вызова из рабочего потока."""
        return asyncio.run(self.convert_batch(inputs, config, on_progress=on_progress))

    # ---- Steps ----
    async def _convert_one(self, item: InputImage, config: ConversionConfig) -> ConversionResult:
        if not item.is_raster:
            raise InvalidInputError(f"Не растровое изображение ({item.mime_type})")

        decoded = await asyncio.to_thread(self._image_service.decode, item.data)
        target = compute_bounded(decoded.width, decoded.height, config.max_width, config.max_height)
        logger.debug("%s: %dx%d -> %s", item.name, decoded.width, decoded.height, target.label)

        rendered = self.render(decoded, target)
        data = await asyncio.to_thread(self.encode, rendered, config)

        return ConversionResult(
            original_name=item.name,
            original_size=item.size,
            processed_name=derive_output_name(item.name, config.target_format),
            processed_data=data,
            processed_size=len(data),
            output_dimensions=target,
            compression_ratio_percent=compression_ratio_percent(item.size, len(data)),
            output_format=config.target_format.pil_format,
        )

    def render(self, image: Image.Image, target: Dimensions) -> Image.Image:
        """Масштабирует изображение ровно до `target` (без обрезки)."""
        if image.size == target.as_tuple():
            return image
        return image.resize(target.as_tuple(), self._resample)

    def encode(self, image: Image.Image, config: ConversionConfig) -> bytes:
        """Сериализует изображение в целевой формат.

        Качество передаётся только форматам с потерями; для PNG/BMP оно не применяется.

        Raises:
            EncodeError: если формат/режим не удаётся записать.
        """
        fmt = config.target_format
        if not fmt.supports_alpha and image.mode != "RGB":
            image = image.convert("RGB")

        save_params: Dict[str, Any] = {"format": fmt.pil_format}
        if fmt.is_lossy:
            save_params["quality"] = config.quality_percent
        if fmt is OutputFormat.PNG:
            save_params["optimize"] = True

        buffer = io.BytesIO()
        try:
            image.save(buffer, **save_params)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"Не удалось сохранить в {fmt.pil_format}: {exc}") from exc
        return buffer.getvalue()


_default_service = ConversionService()


async def convert_batch(
    inputs: Sequence[InputImage],
    config: ConversionConfig,
    on_progress: Optional[ProgressCallback] = None,
) -> List[ConversionResult]:
    return await _default_service.convert_batch(inputs, config, on_progress=on_progress)


def run_batch(
    inputs: Sequence[InputImage],
    config: ConversionConfig,
    on_progress: Optional[ProgressCallback] = None,
) -> List[ConversionResult]:
    return _default_service.run_batch(inputs, config, on_progress=on_progress)
