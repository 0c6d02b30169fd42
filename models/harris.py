#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Детектор углов Харриса на оконных операторах.

Конвейер: яркость -> гауссово сглаживание -> производные Ix, Iy ->
тензор структуры в окне -> отклик det(S) - k * trace(S)^2 -> глобальный
максимум -> порог -> подавление немаксимумов -> бинарная карта углов.
"""

from typing import Optional, Tuple
import numpy as np
from config.settings import *
from models.buffer import Buffer, FLOAT32, STRUCTURE_TENSOR
from models.filtering import filter_2d
from models.kernels import DIFFERENCE_X, DIFFERENCE_Y, check_odd_size, gaussian_kernel
from models.windowing import combine, map_pixels, map_windowed, reduce_pixels


def validate_parameters(smoothing_size: int, structure_size: int, harris_k: float,
                        threshold_ratio: float, suppression_size: int) -> None:
    """
    Проверяет параметры детектора до начала обработки.

    Raises:
        ValueError: если хотя бы один параметр недопустим
    """
    check_odd_size("smoothing_size", smoothing_size)
    check_odd_size("structure_size", structure_size)
    check_odd_size("suppression_size", suppression_size)
    if not harris_k > 0:
        raise ValueError(f"harris_k must be positive, got {harris_k}")
    if not 0.0 <= threshold_ratio <= 1.0:
        raise ValueError(f"threshold_ratio must be between 0 and 1, got {threshold_ratio}")


def smooth(src: Buffer, size: int = DEFAULT_SMOOTHING_SIZE, workers: Optional[int] = None) -> Buffer:
    """Гауссово сглаживание ядром size x size."""
    return filter_2d(src, gaussian_kernel(size), workers)


def gradients(smoothed: Buffer, workers: Optional[int] = None) -> Tuple[Buffer, Buffer]:
    """Производные (Ix, Iy) уже сглаженного изображения первыми разностями."""
    return filter_2d(smoothed, DIFFERENCE_X, workers), filter_2d(smoothed, DIFFERENCE_Y, workers)


def _gradient_products(i_x: np.ndarray, i_y: np.ndarray) -> np.ndarray:
    products = np.empty(i_x.shape, dtype=STRUCTURE_TENSOR)
    products["xx"] = i_x * i_x
    products["yy"] = i_y * i_y
    products["xy"] = i_x * i_y
    return products


def _zero_tensors(pixels: np.ndarray) -> np.ndarray:
    return np.zeros(pixels.shape, dtype=STRUCTURE_TENSOR)


def _sum_tensors(acc: np.ndarray, windows: np.ndarray) -> np.ndarray:
    for field in ("xx", "yy", "xy"):
        acc[field] += windows[field].sum(axis=(2, 3), dtype=np.float32)
    return acc


def structure_tensor_image(src: Buffer, smoothing_size: int = DEFAULT_SMOOTHING_SIZE,
                           structure_size: int = DEFAULT_STRUCTURE_SIZE,
                           workers: Optional[int] = None) -> Buffer:
    """
    Вычисляет тензор структуры для каждого пикселя.

    Args:
        src: Яркость, буфер float32
        smoothing_size: Размер гауссова ядра
        structure_size: Размер окна накопления
        workers: Число потоков

    Returns:
        Буфер STRUCTURE_TENSOR с суммами Ix^2, Iy^2, Ix*Iy по окну
    """
    i_x, i_y = gradients(smooth(src, smoothing_size, workers), workers)
    products = combine(i_x, i_y, _gradient_products, STRUCTURE_TENSOR, workers)
    return map_windowed(products, structure_size, _zero_tensors, _sum_tensors,
                        dtype=STRUCTURE_TENSOR, workers=workers)


def harris_response(tensors: Buffer, harris_k: float = DEFAULT_HARRIS_K,
                    workers: Optional[int] = None) -> Buffer:
    """Отклик Харриса det(S) - k * trace(S)^2 для каждого пикселя."""
    k = np.float32(harris_k)

    def _response(s: np.ndarray) -> np.ndarray:
        det = s["xx"] * s["yy"] - s["xy"] * s["xy"]
        trace = s["xx"] + s["yy"]
        return det - k * trace * trace

    return map_pixels(tensors, _response, FLOAT32, workers)


def max_response(response: Buffer, workers: Optional[int] = None) -> float:
    """Глобальный максимум отклика (не меньше 0)."""
    return reduce_pixels(response, 0.0, lambda acc, pixels: max(acc, float(np.max(pixels))),
                         workers=workers)


def non_max_suppression(response: Buffer, window_size: int, threshold: float,
                        workers: Optional[int] = None) -> Buffer:
    """
    Подавление немаксимумов с глобальным порогом.

    Пиксель ниже порога сразу становится 0. Иначе он подавляется, если в окне
    есть пиксель со строго большим откликом. Равные соседи друг друга не
    подавляют, так что плато из одинаковых максимумов даёт несколько углов.
    Углом считается только положительный отклик. Окно обрезается границей
    изображения, поэтому оно может быть больше самого изображения.

    Args:
        response: Буфер отклика float32
        window_size: Нечётный размер окна
        threshold: Абсолютный порог
        workers: Число потоков

    Returns:
        Буфер float32 со значениями 0.0 и 1.0
    """
    check_odd_size("window_size", window_size)

    def _candidates(pixels: np.ndarray) -> np.ndarray:
        return np.where(pixels >= threshold, pixels, 0.0).astype(np.float32)

    def _suppress(acc: np.ndarray, windows: np.ndarray) -> np.ndarray:
        dominated = (windows > acc[..., np.newaxis, np.newaxis]).any(axis=(2, 3))
        return np.where(dominated, np.float32(0.0), acc)

    def _binarize(acc: np.ndarray) -> np.ndarray:
        return (acc > 0.0).astype(np.float32)

    return map_windowed(response, window_size, _candidates, _suppress, _binarize,
                        dtype=FLOAT32, workers=workers, fill=-np.inf)


def harris_corners(src: Buffer, smoothing_size: int = DEFAULT_SMOOTHING_SIZE,
                   structure_size: int = DEFAULT_STRUCTURE_SIZE,
                   harris_k: float = DEFAULT_HARRIS_K,
                   threshold_ratio: float = DEFAULT_THRESHOLD_RATIO,
                   suppression_size: int = DEFAULT_SUPPRESSION_SIZE,
                   workers: Optional[int] = None) -> Buffer:
    """
    Находит углы Харриса.

    Args:
        src: Яркость, буфер float32
        smoothing_size: Размер гауссова ядра
        structure_size: Окно тензора структуры
        harris_k: Свободный параметр Харриса (> 0)
        threshold_ratio: Порог как доля максимального отклика, [0, 1]
        suppression_size: Окно подавления немаксимумов
        workers: Число потоков

    Returns:
        Буфер float32 того же размера: 1.0 - угол, 0.0 - остальное
    """
    validate_parameters(smoothing_size, structure_size, harris_k, threshold_ratio, suppression_size)
    if src.dtype != FLOAT32:
        raise ValueError(f"harris_corners expects a float32 luminance buffer, got {src.dtype}")

    tensors = structure_tensor_image(src, smoothing_size, structure_size, workers)
    response = harris_response(tensors, harris_k, workers)
    threshold = max_response(response, workers) * threshold_ratio
    return non_max_suppression(response, suppression_size, threshold, workers)
