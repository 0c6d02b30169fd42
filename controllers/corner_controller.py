#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Контроллер для поиска углов в изображениях и видео.
Загружает кадры через OpenCV, запускает детектор, показывает и сохраняет результат.
"""

import time
from typing import Iterator, Optional, Tuple
import cv2
import numpy as np
from config.settings import *
from models.buffer import Buffer
from models.conversion import to_luminance
from models.detectors import CornerDetector
from utils.file_utils import is_video_path


def to_bgra_frame(frame: np.ndarray) -> np.ndarray:
    """
    Приводит кадр OpenCV к 4-канальному BGRA.

    Args:
        frame: Серое, BGR или BGRA изображение uint8

    Returns:
        Массив (H, W, 4) uint8
    """
    if frame.dtype != np.uint8:
        raise ValueError(f"Only 8-bit images are supported, got {frame.dtype}")
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGRA)
    if frame.shape[2] == 3:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2BGRA)
    if frame.shape[2] == 4:
        return frame
    raise ValueError(f"Unsupported number of channels: {frame.shape[2]}")


def highlight_corners(corners: Buffer, image: np.ndarray, block_size: int = CORNER_BLOCK_SIZE,
                      color: Tuple[int, int, int] = COLOR_RED) -> np.ndarray:
    """
    Рисует квадрат вокруг каждого угла.

    Args:
        corners: Бинарная карта углов
        image: Изображение BGR/BGRA того же размера
        block_size: Сторона квадрата
        color: Цвет (B, G, R)

    Returns:
        Копия изображения с отметками
    """
    result = image.copy()
    half_block = block_size // 2
    ys, xs = np.nonzero(corners.pixels > 0.0)
    for y, x in zip(ys, xs):
        cv2.rectangle(result, (int(x) - half_block, int(y) - half_block),
                      (int(x) + half_block, int(y) + half_block), color, CORNER_LINE_THICKNESS)
    return result


class CornerController:
    """
    Контроллер запуска детектора по кадрам входного файла.
    """

    def __init__(self, detector: CornerDetector):
        """
        Инициализация контроллера.

        Args:
            detector: Детектор углов
        """
        self.detector = detector
        self.image = None
        self.capture = None
        self.total_time_ms = 0.0
        self.frame_count = 0

    @property
    def is_video(self) -> bool:
        return self.capture is not None

    def load_input(self, path: str) -> bool:
        """
        Загружает изображение или открывает видео.

        Args:
            path: Путь к файлу

        Returns:
            True если вход открыт успешно
        """
        if not is_video_path(path):
            self.image = cv2.imread(path, cv2.IMREAD_UNCHANGED)
            if self.image is not None:
                return True

        capture = cv2.VideoCapture(path)
        if not capture.isOpened():
            return False
        self.capture = capture
        return True

    def frames(self) -> Iterator[np.ndarray]:
        """Кадры входа: одно изображение или все кадры видео."""
        if self.capture is None:
            if self.image is not None:
                yield self.image
            return

        while True:
            ok, frame = self.capture.read()
            if not ok:
                break
            yield frame
        self.capture.release()

    def process_frame(self, frame: np.ndarray) -> Tuple[Buffer, np.ndarray, float]:
        """
        Ищет углы в кадре и измеряет время работы детектора.

        Args:
            frame: Кадр OpenCV

        Returns:
            Кортеж (карта углов, кадр BGRA, время в мс)
        """
        bgra = to_bgra_frame(frame)
        luminance = to_luminance(Buffer.from_array(bgra))

        start = time.perf_counter()
        corners = self.detector.find_corners(luminance)
        time_ms = (time.perf_counter() - start) * 1000.0

        self.total_time_ms += time_ms
        self.frame_count += 1
        return corners, bgra, time_ms

    @property
    def average_time_ms(self) -> float:
        if self.frame_count == 0:
            return 0.0
        return self.total_time_ms / self.frame_count

    def run(self, show: bool = False, output_path: Optional[str] = None) -> int:
        """
        Обрабатывает все кадры входа.

        Args:
            show: Показывать кадры с отмеченными углами
            output_path: Куда сохранить результат с отметками

        Returns:
            Число обработанных кадров
        """
        writer = None
        highlighted = None
        for frame in self.frames():
            corners, bgra, time_ms = self.process_frame(frame)
            print(f"Кадр {self.frame_count}: {int(np.count_nonzero(corners.pixels))} углов за {time_ms:.1f} мс")

            if not (show or output_path):
                continue

            highlighted = highlight_corners(corners, cv2.cvtColor(bgra, cv2.COLOR_BGRA2BGR))
            if show:
                cv2.imshow(WINDOW_NAMES["CORNERS"], highlighted)
                cv2.waitKey(1)
            if output_path and self.is_video:
                if writer is None:
                    writer = self._open_writer(output_path, highlighted.shape[1], highlighted.shape[0])
                writer.write(highlighted)

        if writer is not None:
            writer.release()
            print(f"[OK] Сохранено: {output_path}")
        elif output_path and highlighted is not None:
            cv2.imwrite(output_path, highlighted)
            print(f"[OK] Сохранено: {output_path}")

        print(f"Обработано кадров: {self.frame_count}, среднее время: {self.average_time_ms:.1f} мс")

        # Ждём закрытия на последнем кадре
        if show and self.frame_count > 0:
            cv2.waitKey(0)
            cv2.destroyAllWindows()
        return self.frame_count

    def _open_writer(self, path: str, width: int, height: int) -> cv2.VideoWriter:
        fps = VIDEO_DEFAULT_FPS
        if self.capture is not None:
            fps = self.capture.get(cv2.CAP_PROP_FPS) or VIDEO_DEFAULT_FPS
        fourcc = cv2.VideoWriter_fourcc(*VIDEO_FOURCC)
        return cv2.VideoWriter(path, fourcc, fps, (width, height))
