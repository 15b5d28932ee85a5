from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from image_converter.config import STATUS_MESSAGE_MS

_LEVEL_COLORS = {
    "success": "#28a745",
    "error": "#dc3545",
    "info": "#17a2b8",
}


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=48, **kwargs)

        self._clear_job: Optional[str] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)  # message stretches

        self._message = ctk.StringVar(value="")
        self._message_label = ctk.CTkLabel(self, textvariable=self._message, anchor="w")
        self._message_label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="ew")

        # Progress (hidden by default)
        self._progress_val = ctk.StringVar(value="")
        self._progress = ctk.CTkProgressBar(self, width=200)
        self._progress.set(0)
        self._progress_label = ctk.CTkLabel(self, textvariable=self._progress_val, width=64, anchor="e")
        self._toggle_progress(visible=False)

    # public API (sync from controller)
    def show_message(self, text: str, level: str = "info") -> None:
        """Показывает уведомление и убирает его через STATUS_MESSAGE_MS."""
        self._message.set(text)
        self._message_label.configure(text_color=_LEVEL_COLORS.get(level, _LEVEL_COLORS["info"]))
        if self._clear_job is not None:
            self.after_cancel(self._clear_job)
        self._clear_job = self.after(STATUS_MESSAGE_MS, self._clear_message)

    def set_progress(self, done: int, total: int) -> None:
        self._toggle_progress(visible=True)
        self._progress.set(done / total if total else 0)
        self._progress_val.set(f"{done}/{total}")

    def hide_progress(self) -> None:
        self._toggle_progress(visible=False)

    # helpers
    def _clear_message(self) -> None:
        self._clear_job = None
        self._message.set("")

    def _toggle_progress(self, visible: bool) -> None:
        if visible:
            self._progress.grid(row=0, column=1, padx=6, pady=8, sticky="e")
            self._progress_label.grid(row=0, column=2, padx=(0, 10), pady=8, sticky="e")
        else:
            self._progress.grid_remove()
            self._progress_label.grid_remove()
            self._progress.set(0)
            self._progress_val.set("")
