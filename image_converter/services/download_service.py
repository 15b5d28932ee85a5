"""Выдача результатов: временные дескрипторы и сохранение в выбранную папку.

Принципы:
- SRP: сервис только размещает байты результата во временной области и
  копирует их получателю; никакой логики преобразования.
- Ресурсы: каждый дескриптор освобождается сразу после использования.
"""
from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from image_converter.config import STAGING_DIR_PREFIX
from image_converter.logger import get_logger
from image_converter.models.image_model import ConversionResult

logger = get_logger("download_service")


def _unique_destination(directory: Path, name: str) -> Path:
    """Подбирает имя без перезаписи: `photo.jpeg`, `photo (1).jpeg`, ..."""
    candidate = directory / name
    stem, suffix = candidate.stem, candidate.suffix
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    return candidate


class DownloadService:
    def __init__(self, staging_root: Optional[Path] = None) -> None:
        self._staging_root = staging_root
        self._owns_root = staging_root is None
        self._active: set[Path] = set()

    @property
    def active_handles(self) -> int:
        """Количество ещё не освобождённых дескрипторов."""
        return len(self._active)

    @contextmanager
    def acquire(self, result: ConversionResult) -> Iterator[Path]:
        """Размещает байты результата во временном файле под производным именем.

        Файл удаляется при выходе из контекста, даже если получатель упал.
        """
        slot = self._staging_dir() / result.result_id
        staged = slot / result.processed_name
        slot.mkdir(parents=True, exist_ok=True)
        try:
            self._active.add(staged)
            staged.write_bytes(result.processed_data)
            yield staged
        finally:
            self._active.discard(staged)
            staged.unlink(missing_ok=True)
            shutil.rmtree(slot, ignore_errors=True)

    def deliver(self, result: ConversionResult, directory: str | Path) -> Path:
        """Сохраняет результат в `directory`, не перезаписывая существующие файлы."""
        target_dir = Path(directory)
        if not target_dir.is_dir():
            raise NotADirectoryError(f"Папка не найдена: {target_dir}")

        with self.acquire(result) as staged:
            destination = _unique_destination(target_dir, result.processed_name)
            shutil.copyfile(staged, destination)
        logger.info("Saved %s", destination)
        return destination

    def deliver_all(self, results: Iterable[ConversionResult], directory: str | Path) -> List[Path]:
        return [self.deliver(result, directory) for result in results]

    def close(self) -> None:
        """Удаляет временную область (если она создана этим сервисом)."""
        if self._staging_root is not None and self._owns_root:
            shutil.rmtree(self._staging_root, ignore_errors=True)
            self._staging_root = None

    # ---- Helpers ----
    def _staging_dir(self) -> Path:
        if self._staging_root is None:
            self._staging_root = Path(tempfile.mkdtemp(prefix=STAGING_DIR_PREFIX))
            self._owns_root = True
        return self._staging_root
