#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Двумерная взаимная корреляция с отражением на границах.
"""

from typing import Optional
import numpy as np
from models.buffer import Buffer, FLOAT32
from models.kernels import FilterKernel
from models.windowing import map_windowed


def filter_2d(src: Buffer, kernel: FilterKernel, workers: Optional[int] = None) -> Buffer:
    """
    Применяет ядро к буферу float32 (корреляция, ядро не переворачивается).

    Для каждого пикселя (x, y) результат равен сумме
    kernel[ky][kx] * src[y + ky - kh/2][x + kx - kw/2], где координаты за
    краем изображения отражаются от него.

    Args:
        src: Буфер float32
        kernel: Ядро нечётного размера
        workers: Число потоков

    Returns:
        Новый буфер float32 того же размера
    """
    if src.dtype != FLOAT32:
        raise ValueError(f"filter_2d expects a float32 buffer, got {src.dtype}")

    weights = kernel.weights

    def _init(pixels: np.ndarray) -> np.ndarray:
        return np.zeros(pixels.shape, dtype=np.float32)

    def _accumulate(acc: np.ndarray, windows: np.ndarray) -> np.ndarray:
        return acc + np.tensordot(windows, weights, axes=([2, 3], [0, 1]))

    return map_windowed(src, (kernel.width, kernel.height), _init, _accumulate,
                        dtype=FLOAT32, workers=workers)
