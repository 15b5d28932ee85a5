"""Чтение исходных файлов с диска и декодирование байтов в изображение.

Принципы:
- SRP: класс отвечает только за загрузку и декодирование, без ресайза и кодирования.
- OCP: новые источники (стрим, буфер обмена) можно добавить отдельными методами.
- ISP: наружу отдаются `InputImage` и `PIL.Image.Image`; интерфейс узкий и конкретный.
"""
from __future__ import annotations

import io
import mimetypes
from pathlib import Path
from typing import Iterable, List, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from image_converter.logger import get_logger
from image_converter.models.errors import DecodeError
from image_converter.models.image_model import InputImage

logger = get_logger("image_service")


class ImageService:
    def read_input(self, file_path: str | Path) -> InputImage:
        """Читает файл с диска и классифицирует его по имени.

        Args:
            file_path: Путь до файла.

        Returns:
            `InputImage` с байтами, именем, размером и MIME-типом.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        mime_type, _encoding = mimetypes.guess_type(path.name)
        data = path.read_bytes()
        return InputImage(
            name=path.name,
            data=data,
            size=len(data),
            mime_type=mime_type or "application/octet-stream",
        )

    def split_images(self, file_paths: Iterable[str | Path]) -> Tuple[List[InputImage], List[str]]:
        """Отделяет растровые изображения от прочих файлов.

        Returns:
            Пару (принятые изображения, имена отклонённых файлов).
        """
        accepted: List[InputImage] = []
        rejected: List[str] = []
        for file_path in file_paths:
            item = self.read_input(file_path)
            if item.is_raster:
                accepted.append(item)
            else:
                rejected.append(item.name)
        if rejected:
            logger.info("Skipped %d non-image file(s): %s", len(rejected), ", ".join(rejected))
        return accepted, rejected

    def decode(self, data: bytes) -> Image.Image:
        """Декодирует байты в изображение в памяти.

        Учитывает EXIF-ориентацию; для анимированных форматов берётся первый кадр.

        Raises:
            DecodeError: если байты не распознаны как растровое изображение.
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                decoded = ImageOps.exif_transpose(img)
                if decoded is img:
                    decoded = img.copy()
        except UnidentifiedImageError as exc:
            raise DecodeError("Файл не является изображением") from exc
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Не удалось декодировать изображение: {exc}") from exc

        if decoded.mode not in ("RGB", "RGBA"):
            decoded = decoded.convert("RGBA")
        return decoded
