import customtkinter as ctk

from image_converter.controllers.app_controller import AppController
from image_converter.ui.bottom_bar import BottomBar
from image_converter.ui.results_panel import ResultsPanel
from image_converter.ui.sidebar import Sidebar


class ImageConverterApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Image Converter")
        self.minsize(900, 600)

        # root layout: left results, right sidebar
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._results = ResultsPanel(self)
        self._results.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            sidebar=self._sidebar, results_panel=self._results, bottom=self._bottom, window=self
        )
        self._controller.bind_events()
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self) -> None:
        self._controller.shutdown()
        self.destroy()
