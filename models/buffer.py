#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модель пиксельного буфера.

Буфер владеет непрерывной областью байтов и описывает её шириной, высотой и
шагом строки (stride). Строки не обязаны быть плотно упакованы: строка y
начинается со смещения y * stride. Доступ к пикселям идёт через numpy-представление
с явными шагами, без копирования данных.
"""

from typing import Optional, Tuple
import numpy as np


# Форматы пикселей
FLOAT32 = np.dtype(np.float32)
BGRA32 = np.dtype([("b", np.uint8), ("g", np.uint8), ("r", np.uint8), ("a", np.uint8)])
STRUCTURE_TENSOR = np.dtype([("xx", np.float32), ("yy", np.float32), ("xy", np.float32)])


class Buffer:
    """
    Прямоугольный буфер пикселей с явным шагом строки.

    Размеры задаются один раз при создании и больше не меняются.
    """

    def __init__(self, width: int, height: int, dtype=FLOAT32,
                 stride: Optional[int] = None, data=None):
        """
        Создаёт буфер.

        Args:
            width: Ширина в пикселях (> 0)
            height: Высота в пикселях (> 0)
            dtype: Тип элемента (FLOAT32, BGRA32, STRUCTURE_TENSOR и т.п.)
            stride: Байт на строку, не меньше width * размер элемента
            data: Внешние байты; копируются. Если None - буфер заполняется нулями
        """
        dtype = np.dtype(dtype)
        if width <= 0:
            raise ValueError("The width parameter must be larger than zero")
        if height <= 0:
            raise ValueError("The height parameter must be larger than zero")

        row_bytes = width * dtype.itemsize
        if stride is None:
            stride = row_bytes
        if stride < row_bytes:
            raise ValueError("The stride parameter is not large enough to fit the width of the image")

        if data is None:
            data = bytearray(stride * height)
        else:
            data = bytearray(data)
            if len(data) < stride * height:
                raise ValueError("The data parameter is not large enough to fit the entire image")

        self._width = int(width)
        self._height = int(height)
        self._stride = int(stride)
        self._dtype = dtype
        self._data = data

    @classmethod
    def from_bytes(cls, data, width: int, height: int, stride: int, dtype=FLOAT32) -> "Buffer":
        """Создаёт буфер из внешних байтов с проверкой размера."""
        return cls(width, height, dtype, stride=stride, data=data)

    @classmethod
    def from_array(cls, array: np.ndarray, dtype=None) -> "Buffer":
        """
        Создаёт буфер из numpy-массива.

        Массив (H, W, 4) uint8 трактуется как BGRA32 (порядок каналов OpenCV).
        Остальные массивы должны быть двумерными.

        Args:
            array: Исходный массив
            dtype: Тип элемента результата (по умолчанию тип массива)

        Returns:
            Новый буфер с копией данных
        """
        array = np.asarray(array)
        if array.ndim == 3 and array.shape[2] == 4 and array.dtype == np.uint8:
            array = np.ascontiguousarray(array).view(BGRA32)[..., 0]
        elif array.ndim != 2:
            raise ValueError(f"Expected a 2D array or an (H, W, 4) uint8 array, got shape {array.shape}")

        if dtype is not None:
            array = array.astype(dtype)

        height, width = array.shape
        buffer = cls(width, height, array.dtype)
        buffer.pixels[...] = array
        return buffer

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def shape(self) -> Tuple[int, int]:
        """Форма в порядке numpy: (высота, ширина)."""
        return self._height, self._width

    @property
    def data(self) -> bytearray:
        """Сырые байты, не меньше height * stride, построчно."""
        return self._data

    @property
    def pixels(self) -> np.ndarray:
        """Представление (H, W) поверх байтов буфера с учётом stride."""
        return np.ndarray(
            shape=(self._height, self._width),
            dtype=self._dtype,
            buffer=self._data,
            strides=(self._stride, self._dtype.itemsize),
        )

    def row(self, y: int) -> np.ndarray:
        """Пиксели строки y (представление, без копирования)."""
        if not 0 <= y < self._height:
            raise IndexError(f"Row {y} is outside of [0, {self._height - 1}]")
        return self.pixels[y]

    def same_size(self, other: "Buffer") -> bool:
        return self._width == other.width and self._height == other.height

    def to_array(self) -> np.ndarray:
        """Плотно упакованная копия пикселей."""
        return np.array(self.pixels)

    def __repr__(self) -> str:
        return (f"Buffer(width={self._width}, height={self._height}, "
                f"stride={self._stride}, dtype={self._dtype})")
