"""Исключения конвейера преобразования.

Каждая ошибка несёт индекс и имя входного файла, на котором прервался батч,
чтобы вызывающая сторона могла сама сформулировать сообщение пользователю.
"""
from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Базовая ошибка батча."""

    def __init__(self, message: str, index: Optional[int] = None, original_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.index = index
        self.original_name = original_name

    def __str__(self) -> str:
        if self.index is None:
            return self.message
        return f"[{self.index}] {self.original_name}: {self.message}"


class InvalidInputError(ConversionError):
    """Пустой батч или элемент, не являющийся растровым изображением."""


class DecodeError(ConversionError):
    """Файл повреждён или формат не распознан."""


class EncodeError(ConversionError):
    """Не удалось сохранить изображение в целевом формате."""
