"""Панель результатов: карточки с превью, метаданными и кнопками сохранения.

Принципы:
- SRP: отвечает только за представление результатов; сохранение делегирует контроллеру.
- Чистый код: карточки ссылаются на результат через `result_id`, а не через позицию.
"""
from __future__ import annotations

import io
from typing import Callable, List, Optional, Sequence

import customtkinter as ctk
import tkinter as tk
from PIL import Image

from image_converter.config import THUMBNAIL_SIZE
from image_converter.models.image_model import ConversionResult
from image_converter.services.size_format import format_file_size


def _make_thumbnail(result: ConversionResult) -> Optional[ctk.CTkImage]:
    try:
        with Image.open(io.BytesIO(result.processed_data)) as img:
            preview = img.convert("RGBA")
    except OSError:
        return None
    preview.thumbnail(THUMBNAIL_SIZE)
    return ctk.CTkImage(light_image=preview, dark_image=preview, size=preview.size)


def describe_result(result: ConversionResult) -> List[str]:
    """Строки описания карточки (формат, размеры, вес, сжатие)."""
    return [
        f"Формат: {result.output_format}",
        f"Размеры: {result.output_dimensions.label}",
        f"Исходный размер: {format_file_size(result.original_size)}",
        f"Новый размер: {format_file_size(result.processed_size)}",
        f"Сжатие: {result.compression_ratio_percent:.1f}% меньше",
    ]


class ResultsPanel(ctk.CTkFrame):
    """Прокручиваемый список карточек результатов."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(1, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self.on_download: Optional[Callable[[str], None]] = None
        self.on_download_all: Optional[Callable[[], None]] = None

        self._title = ctk.CTkLabel(self, text="Результаты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")
        self._download_all_btn = ctk.CTkButton(
            self, text="Скачать все", state="disabled", command=self._emit_download_all
        )
        self._download_all_btn.grid(row=0, column=1, padx=8, pady=(8, 4), sticky="e")

        self._list = ctk.CTkScrollableFrame(self)
        self._list.grid(row=1, column=0, columnspan=2, padx=8, pady=(0, 8), sticky="nsew")
        self._list.grid_columnconfigure(1, weight=1)

        # CTkImage нужно удерживать, иначе Tk потеряет изображение
        self._thumbnails: List[ctk.CTkImage] = []

    # ---- Public API ----
    def set_results(self, results: Sequence[ConversionResult]) -> None:
        """Перерисовывает карточки для переданных результатов."""
        self.clear()
        for row, result in enumerate(results):
            self._add_card(row, result)
        self._download_all_btn.configure(state="normal" if results else "disabled")

    def clear(self) -> None:
        for child in self._list.winfo_children():
            child.destroy()
        self._thumbnails.clear()
        self._download_all_btn.configure(state="disabled")

    # ---- Internals ----
    def _add_card(self, row: int, result: ConversionResult) -> None:
        card = ctk.CTkFrame(self._list)
        card.grid(row=row, column=0, columnspan=2, padx=4, pady=4, sticky="ew")
        card.grid_columnconfigure(1, weight=1)

        thumb = _make_thumbnail(result)
        if thumb is not None:
            self._thumbnails.append(thumb)
            ctk.CTkLabel(card, image=thumb, text="").grid(row=0, column=0, rowspan=3, padx=8, pady=8)

        ctk.CTkLabel(card, text=result.processed_name, font=ctk.CTkFont(weight="bold"), anchor="w").grid(
            row=0, column=1, padx=6, pady=(8, 2), sticky="ew"
        )
        ctk.CTkLabel(card, text="\n".join(describe_result(result)), anchor="w", justify="left").grid(
            row=1, column=1, padx=6, pady=(0, 2), sticky="ew"
        )
        ctk.CTkButton(
            card,
            text="Скачать",
            width=96,
            command=lambda result_id=result.result_id: self._emit_download(result_id),
        ).grid(row=2, column=1, padx=6, pady=(0, 8), sticky="w")

    def _emit_download(self, result_id: str) -> None:
        if self.on_download:
            self.on_download(result_id)

    def _emit_download_all(self) -> None:
        if self.on_download_all:
            self.on_download_all()
