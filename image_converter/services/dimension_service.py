"""Расчёт итоговых размеров с сохранением пропорций.

Принципы:
- SRP: чистая функция без побочных эффектов, ничего не знает о PIL.
"""
from __future__ import annotations

import math
from typing import Optional

from image_converter.models.image_model import Dimensions


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_bounded(
    original_width: int,
    original_height: int,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
) -> Dimensions:
    """Вписывает исходный размер в ограничения, сохраняя соотношение сторон.

    Ограничения применяются последовательно: сначала ширина, затем высота
    (от уже уменьшенного результата). Изображение только уменьшается,
    отсутствующее ограничение означает «без ограничения по оси».

    Args:
        original_width: Исходная ширина, px (> 0).
        original_height: Исходная высота, px (> 0).
        max_width: Максимальная ширина или None.
        max_height: Максимальная высота или None.

    Returns:
        `Dimensions` с целыми сторонами не меньше 1.
    """
    limit_w = original_width if max_width is None else max_width
    limit_h = original_height if max_height is None else max_height

    width: float = original_width
    height: float = original_height
    aspect_ratio = original_width / original_height

    if width > limit_w:
        width = limit_w
        height = width / aspect_ratio

    if height > limit_h:
        height = limit_h
        width = height * aspect_ratio

    return Dimensions(width=max(1, _round_half_up(width)), height=max(1, _round_half_up(height)))
