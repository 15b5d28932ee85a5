"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы.
- Накопление выбранных файлов и результатов живёт здесь, ядро состояния не хранит.
"""
from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import TclError, filedialog
from typing import Any, Dict, List, Optional, Tuple

import customtkinter as ctk

from image_converter.config import DOWNLOAD_STAGGER_MS, INPUT_FILETYPES, RESULT_POLL_MS
from image_converter.logger import get_logger
from image_converter.models.errors import ConversionError
from image_converter.models.image_model import ConversionConfig, ConversionResult, InputImage
from image_converter.services.conversion_service import ConversionService
from image_converter.services.download_service import DownloadService
from image_converter.services.image_service import ImageService
from image_converter.ui.bottom_bar import BottomBar
from image_converter.ui.results_panel import ResultsPanel
from image_converter.ui.sidebar import Sidebar

logger = get_logger("app_controller")


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Приём файлов через `ImageService`, запуск батча через `ConversionService`.
    - Сохранение результатов через `DownloadService` (по `result_id`).
    """
    sidebar: Sidebar
    results_panel: ResultsPanel
    bottom: BottomBar
    window: ctk.CTk

    _image_service: ImageService = field(default_factory=ImageService)
    _conversion_service: ConversionService = field(default_factory=ConversionService)
    _download_service: DownloadService = field(default_factory=DownloadService)
    _pending: List[InputImage] = field(default_factory=list)
    _results: Dict[str, ConversionResult] = field(default_factory=dict)
    _events: "queue.Queue[Tuple[str, Any]]" = field(default_factory=queue.Queue)
    _worker: Optional[threading.Thread] = None
    _last_dir: Optional[Path] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Компоненты UI ничего не знают друг о друге, общаются через контроллер.
        """
        self.sidebar.on_add_files = self._handle_add_files
        self.sidebar.on_process = self._handle_process
        self.sidebar.on_clear = self._handle_clear

        self.results_panel.on_download = self._handle_download
        self.results_panel.on_download_all = self._handle_download_all

    def shutdown(self) -> None:
        """Освобождает временную область сохранения."""
        self._download_service.close()

    # ---- Handlers ----
    def _handle_add_files(self) -> None:
        try:
            file_paths = filedialog.askopenfilenames(title="Выберите изображения", filetypes=INPUT_FILETYPES)
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_paths:
            return

        try:
            images, _rejected = self._image_service.split_images(file_paths)
        except OSError as exc:
            self.bottom.show_message(f"Не удалось прочитать файл: {exc}", "error")
            return

        if not images:
            self.bottom.show_message("Выберите только файлы изображений.", "error")
            return

        self._pending.extend(images)
        self.sidebar.set_pending_count(len(self._pending))
        self.bottom.show_message(f"Добавлено изображений: {len(images)}", "success")

    def _handle_process(self) -> None:
        if self._worker is not None:
            return
        if not self._pending:
            self.bottom.show_message("Сначала добавьте изображения.", "error")
            return

        format_token, quality, max_w, max_h = self.sidebar.get_settings()
        try:
            config = ConversionConfig.from_ui(format_token, quality, max_w, max_h)
        except ValueError as exc:
            self.bottom.show_message(str(exc), "error")
            return

        inputs = list(self._pending)
        self.sidebar.set_busy(True)
        self.results_panel.clear()
        self._results.clear()
        self.bottom.set_progress(0, len(inputs))

        self._worker = threading.Thread(target=self._run_batch, args=(inputs, config), daemon=True)
        self._worker.start()
        self.window.after(RESULT_POLL_MS, self._poll_events)

    def _handle_download(self, result_id: str) -> None:
        result = self._results.get(result_id)
        if result is None:
            return
        directory = self._ask_directory()
        if directory is None:
            return
        self._deliver(result, directory)

    def _handle_download_all(self) -> None:
        if not self._results:
            self.bottom.show_message("Нет обработанных изображений для сохранения.", "error")
            return
        directory = self._ask_directory()
        if directory is None:
            return
        # Сохранения разнесены во времени, чтобы не блокировать UI одним длинным циклом
        for index, result in enumerate(self._results.values()):
            self.window.after(index * DOWNLOAD_STAGGER_MS, self._deliver, result, directory)
        self.bottom.show_message("Сохранение всех файлов запущено.", "success")

    def _handle_clear(self) -> None:
        self._pending.clear()
        self._results.clear()
        self.sidebar.set_pending_count(0)
        self.results_panel.clear()
        self.bottom.hide_progress()
        self.bottom.show_message("Список изображений очищен.", "info")

    # ---- Helpers ----
    def _run_batch(self, inputs: List[InputImage], config: ConversionConfig) -> None:
        """Выполняется в рабочем потоке; общается с UI только через очередь."""
        try:
            results = self._conversion_service.run_batch(
                inputs,
                config,
                on_progress=lambda done, total, _name: self._events.put(("progress", (done, total))),
            )
        except ConversionError as exc:
            self._events.put(("error", exc))
        except Exception as exc:
            logger.exception("Unexpected failure while converting")
            self._events.put(("error", exc))
        else:
            self._events.put(("done", results))

    def _poll_events(self) -> None:
        finished = False
        while True:
            try:
                kind, payload = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "progress":
                self.bottom.set_progress(*payload)
            elif kind == "done":
                self._on_batch_done(payload)
                finished = True
            elif kind == "error":
                self._on_batch_failed(payload)
                finished = True

        if finished:
            self._worker = None
            self.sidebar.set_busy(False)
            self.bottom.hide_progress()
        else:
            self.window.after(RESULT_POLL_MS, self._poll_events)

    def _on_batch_done(self, results: List[ConversionResult]) -> None:
        self._results = {result.result_id: result for result in results}
        self.results_panel.set_results(results)
        self.bottom.show_message("Все изображения успешно обработаны!", "success")

    def _on_batch_failed(self, exc: Exception) -> None:
        if isinstance(exc, ConversionError) and exc.original_name is not None:
            text = f"Ошибка обработки «{exc.original_name}»: {exc.message}"
        else:
            text = "Ошибка обработки изображений. Попробуйте ещё раз."
        self.bottom.show_message(text, "error")

    def _ask_directory(self) -> Optional[Path]:
        try:
            chosen = filedialog.askdirectory(
                title="Папка для сохранения",
                initialdir=str(self._last_dir) if self._last_dir else None,
            )
        except TclError:
            return None
        if not chosen:
            return None
        self._last_dir = Path(chosen)
        return self._last_dir

    def _deliver(self, result: ConversionResult, directory: Path) -> None:
        try:
            saved = self._download_service.deliver(result, directory)
        except OSError as exc:
            self.bottom.show_message(f"Не удалось сохранить {result.processed_name}: {exc}", "error")
            return
        self.bottom.show_message(f"Сохранено: {saved.name}", "success")
