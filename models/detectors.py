#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Детекторы углов с общим интерфейсом.

HarrisDetector - собственная реализация на оконных операторах.
OpenCVHarrisDetector - эталон на cv2.cornerHarris для сравнения.
"""

from abc import ABC, abstractmethod
from typing import Optional
import cv2
import numpy as np
from config.settings import *
from models.buffer import Buffer, FLOAT32
from models.conversion import to_luminance
from models.harris import harris_corners, non_max_suppression, validate_parameters


class CornerDetector(ABC):
    """
    Базовый класс детектора: параметры проверяются при создании,
    до обработки каких-либо пикселей.
    """

    def __init__(self, smoothing_size: int = DEFAULT_SMOOTHING_SIZE,
                 structure_size: int = DEFAULT_STRUCTURE_SIZE,
                 harris_k: float = DEFAULT_HARRIS_K,
                 threshold_ratio: float = DEFAULT_THRESHOLD_RATIO,
                 suppression_size: int = DEFAULT_SUPPRESSION_SIZE):
        validate_parameters(smoothing_size, structure_size, harris_k, threshold_ratio, suppression_size)
        self.smoothing_size = int(smoothing_size)
        self.structure_size = int(structure_size)
        self.harris_k = float(harris_k)
        self.threshold_ratio = float(threshold_ratio)
        self.suppression_size = int(suppression_size)

    @abstractmethod
    def find_corners(self, luminance: Buffer) -> Buffer:
        """
        Находит углы в буфере яркости.

        Args:
            luminance: Буфер float32

        Returns:
            Буфер float32 того же размера со значениями 0.0 / 1.0
        """

    def detect(self, image: Buffer) -> Buffer:
        """Переводит цветной буфер в яркость и ищет углы."""
        return self.find_corners(to_luminance(image))

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(smoothing_size={self.smoothing_size}, "
                f"structure_size={self.structure_size}, harris_k={self.harris_k}, "
                f"threshold_ratio={self.threshold_ratio}, suppression_size={self.suppression_size})")


class HarrisDetector(CornerDetector):
    """Детектор Харриса на numpy с распараллеливанием по строкам."""

    def __init__(self, *args, workers: Optional[int] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.workers = workers

    def find_corners(self, luminance: Buffer) -> Buffer:
        return harris_corners(
            luminance,
            smoothing_size=self.smoothing_size,
            structure_size=self.structure_size,
            harris_k=self.harris_k,
            threshold_ratio=self.threshold_ratio,
            suppression_size=self.suppression_size,
            workers=self.workers,
        )


class OpenCVHarrisDetector(CornerDetector):
    """
    Эталонная реализация на стандартных компонентах OpenCV.

    smoothing_size передаётся как апертура оператора Собеля, поэтому
    допустимы только 1, 3, 5 и 7. Порог считается от диапазона отклика:
    min + ratio * (max - min).
    """

    SOBEL_APERTURES = (1, 3, 5, 7)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.smoothing_size not in self.SOBEL_APERTURES:
            raise ValueError(
                f"smoothing_size must be one of {self.SOBEL_APERTURES} for the OpenCV detector, "
                f"got {self.smoothing_size}"
            )

    def find_corners(self, luminance: Buffer) -> Buffer:
        if luminance.dtype != FLOAT32:
            raise ValueError(f"Expected a float32 luminance buffer, got {luminance.dtype}")

        image = luminance.to_array()
        response = cv2.cornerHarris(image, self.structure_size, self.smoothing_size, self.harris_k)
        min_value, max_value, _, _ = cv2.minMaxLoc(response)
        threshold = min_value + self.threshold_ratio * (max_value - min_value)
        return non_max_suppression(Buffer.from_array(response.astype(np.float32)),
                                   self.suppression_size, threshold)
