"""Боковая панель: добавление файлов и параметры преобразования.

Принципы:
- SRP: управляет только UI параметров, не содержит логики преобразования.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk

from image_converter.config import DEFAULT_FORMAT, FORMAT_CHOICES, QUALITY_DEFAULT, QUALITY_MAX, QUALITY_MIN


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файлы, формат, качество, размеры, действия."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_add_files: Optional[Callable[[], None]] = None
        self.on_process: Optional[Callable[[], None]] = None
        self.on_clear: Optional[Callable[[], None]] = None

        # Files
        self._title = ctk.CTkLabel(self, text="Файлы", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._add_btn = ctk.CTkButton(self, text="Добавить изображения…", command=self._emit_add_files)
        self._add_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._pending_val = ctk.StringVar(value="Нет выбранных файлов")
        self._pending_label = ctk.CTkLabel(self, textvariable=self._pending_val, anchor="w", justify="left")
        self._pending_label.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Settings section
        self._settings_title = ctk.CTkLabel(self, text="Параметры", font=ctk.CTkFont(size=16, weight="bold"))
        self._settings_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._format_label = ctk.CTkLabel(self, text="Формат:")
        self._format_label.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="w")
        self._format_menu = ctk.CTkOptionMenu(self, values=list(FORMAT_CHOICES))
        self._format_menu.set(DEFAULT_FORMAT)
        self._format_menu.grid(row=5, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._quality_val = ctk.StringVar(value=f"{QUALITY_DEFAULT}%")
        self._quality_label = ctk.CTkLabel(self, text="Качество:")
        self._quality_slider = ctk.CTkSlider(
            self,
            from_=QUALITY_MIN,
            to=QUALITY_MAX,
            number_of_steps=QUALITY_MAX - QUALITY_MIN,
            command=self._on_quality_change,
        )
        self._quality_slider.set(QUALITY_DEFAULT)
        self._quality_value = ctk.CTkLabel(self, textvariable=self._quality_val, width=48, anchor="w")
        self._quality_label.grid(row=6, column=0, padx=8, pady=(0, 2), sticky="w")
        self._quality_slider.grid(row=7, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._quality_value.grid(row=8, column=0, padx=8, pady=(0, 8), sticky="w")

        # Пустое поле — без ограничения по оси
        self._max_w_val = ctk.StringVar(value="")
        self._max_h_val = ctk.StringVar(value="")
        self._max_w_label = ctk.CTkLabel(self, text="Макс. ширина, px:")
        self._max_w_entry = ctk.CTkEntry(self, textvariable=self._max_w_val)
        self._max_h_label = ctk.CTkLabel(self, text="Макс. высота, px:")
        self._max_h_entry = ctk.CTkEntry(self, textvariable=self._max_h_val)
        self._max_w_label.grid(row=9, column=0, padx=8, pady=(0, 2), sticky="w")
        self._max_w_entry.grid(row=10, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._max_h_label.grid(row=11, column=0, padx=8, pady=(0, 2), sticky="w")
        self._max_h_entry.grid(row=12, column=0, padx=8, pady=(0, 12), sticky="ew")

        # filler
        self.grid_rowconfigure(99, weight=1)

        # Actions
        self._process_btn = ctk.CTkButton(self, text="Преобразовать", command=self._emit_process)
        self._process_btn.grid(row=100, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._clear_btn = ctk.CTkButton(
            self, text="Очистить", fg_color="transparent", border_width=1, command=self._emit_clear
        )
        self._clear_btn.grid(row=101, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Public API ----
    def set_pending_count(self, count: int) -> None:
        """Показывает, сколько файлов ожидает обработки."""
        self._pending_val.set(f"Выбрано файлов: {count}" if count else "Нет выбранных файлов")

    def set_busy(self, busy: bool) -> None:
        """Блокирует действия на время обработки батча."""
        state = "disabled" if busy else "normal"
        self._add_btn.configure(state=state)
        self._process_btn.configure(state=state)
        self._clear_btn.configure(state=state)

    def get_settings(self) -> Tuple[str, int, str, str]:
        """Возвращает (формат, качество в %, макс. ширина, макс. высота) как есть из виджетов."""
        return (
            self._format_menu.get(),
            int(round(self._quality_slider.get())),
            self._max_w_val.get(),
            self._max_h_val.get(),
        )

    # ---- Events ----
    def _emit_add_files(self) -> None:
        if self.on_add_files:
            self.on_add_files()

    def _emit_process(self) -> None:
        if self.on_process:
            self.on_process()

    def _emit_clear(self) -> None:
        if self.on_clear:
            self.on_clear()

    def _on_quality_change(self, value: float) -> None:
        self._quality_val.set(f"{int(round(value))}%")
