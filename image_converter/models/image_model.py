"""Модели данных конвертера: входные изображения, параметры и результаты.

Принципы:
- SRP: только структуры данных и нормализация значений, без обработки пикселей.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости в пределах батча.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class OutputFormat(str, Enum):
    """Целевой формат. Значение — каноническое расширение (без точки)."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    BMP = "bmp"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @property
    def is_lossy(self) -> bool:
        """Учитывает ли кодек параметр качества."""
        return self in (OutputFormat.JPEG, OutputFormat.WEBP)

    @property
    def supports_alpha(self) -> bool:
        return self in (OutputFormat.PNG, OutputFormat.WEBP)

    @classmethod
    def from_token(cls, token: str) -> "OutputFormat":
        """Разбирает токен формата из UI ("jpeg", "JPG", "webp", ...)."""
        normalized = token.strip().lower()
        if normalized == "jpg":
            normalized = "jpeg"
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Неподдерживаемый формат: {token!r}") from exc


@dataclass(frozen=True)
class InputImage:
    """Исходный файл: байты, имя и размер.

    Fields:
        name: Имя исходного файла.
        data: Содержимое файла как есть.
        size: Размер в байтах (по умолчанию `len(data)`).
        mime_type: MIME-классификация, например "image/png".
    """
    name: str
    data: bytes = field(repr=False)
    size: int = -1
    mime_type: str = "application/octet-stream"

    def __post_init__(self) -> None:
        if self.size < 0:
            object.__setattr__(self, "size", len(self.data))

    @property
    def is_raster(self) -> bool:
        return self.mime_type.startswith("image/") and self.mime_type != "image/svg+xml"


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"

    def as_tuple(self) -> tuple[int, int]:
        return self.width, self.height


def _parse_optional_dimension(text: Optional[str]) -> Optional[int]:
    if text is None or not str(text).strip():
        return None
    try:
        return int(str(text).strip())
    except ValueError as exc:
        raise ValueError(f"Размер должен быть целым числом: {text!r}") from exc


@dataclass(frozen=True)
class ConversionConfig:
    """Параметры одного запуска батча.

    `quality` хранится в диапазоне [0, 1] и зажимается при создании.
    `max_width` / `max_height` равные None означают «без ограничения по оси».
    """
    target_format: OutputFormat = OutputFormat.JPEG
    quality: float = 0.8
    max_width: Optional[int] = None
    max_height: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.target_format, OutputFormat):
            object.__setattr__(self, "target_format", OutputFormat.from_token(str(self.target_format)))
        object.__setattr__(self, "quality", min(1.0, max(0.0, float(self.quality))))
        for name in ("max_width", "max_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    @classmethod
    def from_ui(
        cls,
        format_token: str,
        quality_percent: float,
        max_width_text: Optional[str] = None,
        max_height_text: Optional[str] = None,
    ) -> "ConversionConfig":
        """Собирает конфигурацию из значений виджетов (качество 0–100, пустые поля = без ограничения)."""
        return cls(
            target_format=OutputFormat.from_token(format_token),
            quality=float(quality_percent) / 100.0,
            max_width=_parse_optional_dimension(max_width_text),
            max_height=_parse_optional_dimension(max_height_text),
        )

    @property
    def quality_percent(self) -> int:
        return int(round(self.quality * 100))


@dataclass(frozen=True)
class ConversionResult:
    """Результат преобразования одного входного файла.

    `result_id` — непрозрачный идентификатор, по которому UI ссылается на
    результат вместо позиции в списке.
    """
    original_name: str
    original_size: int
    processed_name: str
    processed_data: bytes = field(repr=False)
    processed_size: int
    output_dimensions: Dimensions
    compression_ratio_percent: float
    output_format: str
    result_id: str = field(default_factory=lambda: uuid.uuid4().hex)
