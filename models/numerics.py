#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Числовые утилиты: ограничение значений и отражение координат у границ.
"""

import numpy as np


class ReflectionError(RuntimeError):
    """Координату нельзя вернуть в диапазон одним отражением."""


def clamp(value, lo, hi):
    """Ограничивает значение диапазоном [lo, hi] обрезанием."""
    if value > hi:
        return hi
    if value < lo:
        return lo
    return value


def reflect(value: int, lo: int, hi: int) -> int:
    """
    Возвращает координату в диапазон [lo, hi] зеркальным отражением от края.

    Значение на 2 за краем отражается на 2 внутрь (край не дублируется).

    Args:
        value: Исходная координата
        lo: Минимальная допустимая координата
        hi: Максимальная допустимая координата

    Returns:
        Координата внутри диапазона

    Raises:
        ReflectionError: если одного отражения недостаточно
    """
    if value > hi:
        reflected = hi + hi - value
        if reflected < lo:
            raise ReflectionError(f"Значение {value} слишком велико для отражения в [{lo}, {hi}]")
        return reflected

    if value < lo:
        reflected = lo + lo - value
        if reflected > hi:
            raise ReflectionError(f"Значение {value} слишком мало для отражения в [{lo}, {hi}]")
        return reflected

    return value


def reflect_indices(indices: np.ndarray, lo: int, hi: int) -> np.ndarray:
    """Векторная версия reflect для массива координат."""
    indices = np.asarray(indices, dtype=np.intp)
    reflected = np.where(indices > hi, 2 * hi - indices, indices)
    reflected = np.where(indices < lo, 2 * lo - indices, reflected)
    if reflected.size and (reflected.min() < lo or reflected.max() > hi):
        raise ReflectionError(
            f"Координаты [{int(indices.min())}, {int(indices.max())}] "
            f"нельзя отразить в [{lo}, {hi}]"
        )
    return reflected
