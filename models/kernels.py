#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ядра взаимной корреляции: гауссово сглаживание и первые разности.
"""

from typing import Iterable
import numpy as np


def check_odd_size(name: str, value: int) -> int:
    """Проверяет, что размер - положительное нечётное число."""
    if int(value) != value or value <= 0 or value % 2 == 0:
        raise ValueError(f"{name} must be a positive odd number, got {value}")
    return int(value)


class FilterKernel:
    """
    Ядро 2D-корреляции из весов float32.

    Ширина и высота нечётные, так что у ядра есть центральная ячейка.
    Веса хранятся построчно и не изменяются после создания.
    """

    def __init__(self, width: int, height: int, values: Iterable[float]):
        """
        Args:
            width: Нечётная ширина ядра
            height: Нечётная высота ядра
            values: Ровно width * height весов, построчно
        """
        check_odd_size("width", width)
        check_odd_size("height", height)
        weights = np.array(list(values), dtype=np.float32)
        if weights.size != width * height:
            raise ValueError(
                f"There must be exactly width*height ({width * height}) values in the kernel, got {weights.size}"
            )
        weights = weights.reshape((height, width))
        weights.setflags(write=False)
        self._weights = weights

    @property
    def width(self) -> int:
        return self._weights.shape[1]

    @property
    def height(self) -> int:
        return self._weights.shape[0]

    @property
    def weights(self) -> np.ndarray:
        """Веса формы (высота, ширина), только чтение."""
        return self._weights

    def row(self, y: int) -> np.ndarray:
        return self._weights[y]

    def __repr__(self) -> str:
        return f"FilterKernel({self.width}x{self.height})"


def gaussian_kernel(size: int) -> FilterKernel:
    """
    Нормированное гауссово ядро size x size.

    Сигма выбирается так, чтобы ~95% массы гауссианы попало в окно
    (правило 68-95-99.7): sigma = (size - 1) / 4. Веса делятся на их сумму,
    поэтому ядро сохраняет постоянную составляющую.

    Args:
        size: Положительный нечётный размер

    Returns:
        Ядро FilterKernel
    """
    size = check_odd_size("size", size)
    if size == 1:
        return FilterKernel(1, 1, [1.0])

    sigma = (size - 1) / 4.0
    offset = size // 2
    coords = np.arange(size, dtype=np.float64) - offset
    x, y = np.meshgrid(coords, coords)
    values = np.exp(-(x * x + y * y) / (2.0 * sigma * sigma))
    values /= values.sum()
    return FilterKernel(size, size, values.ravel())


# Первые разности (сглаживание выполняется отдельным проходом до них)
DIFFERENCE_X = FilterKernel(3, 1, [1.0, 0.0, -1.0])
DIFFERENCE_Y = FilterKernel(1, 3, [1.0, 0.0, -1.0])
