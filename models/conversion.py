#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Преобразования между цветными буферами и буферами яркости.
"""

from typing import Optional
import numpy as np
from config.settings import LUMA_WEIGHTS, MAX_PIXEL_VALUE, MIN_PIXEL_VALUE
from models.buffer import Buffer, BGRA32, FLOAT32
from models.windowing import map_pixels


_LUMA_R = np.float32(LUMA_WEIGHTS["r"])
_LUMA_G = np.float32(LUMA_WEIGHTS["g"])
_LUMA_B = np.float32(LUMA_WEIGHTS["b"])
_SCALE = np.float32(MAX_PIXEL_VALUE)


def _luma(pixels: np.ndarray) -> np.ndarray:
    red = pixels["r"].astype(np.float32) / _SCALE
    green = pixels["g"].astype(np.float32) / _SCALE
    blue = pixels["b"].astype(np.float32) / _SCALE
    return red * _LUMA_R + green * _LUMA_G + blue * _LUMA_B


def to_luminance(src: Buffer, workers: Optional[int] = None) -> Buffer:
    """
    Конвертирует буфер в яркость float32 в диапазоне [0, 1].

    BGRA32 переводится по Rec.709 (как для sRGB), альфа-канал игнорируется.
    Буфер float32 уже считается яркостью и копируется.

    Args:
        src: Буфер BGRA32 или float32
        workers: Число потоков

    Returns:
        Новый буфер float32
    """
    if src.dtype == BGRA32:
        return map_pixels(src, _luma, FLOAT32, workers)
    if src.dtype == FLOAT32:
        return map_pixels(src, np.copy, FLOAT32, workers)
    raise ValueError(f"Unsupported pixel format for luminance conversion: {src.dtype}")


def _opaque_gray(pixels: np.ndarray) -> np.ndarray:
    value = np.rint(np.clip(pixels, 0.0, 1.0) * _SCALE)
    value = np.clip(value, MIN_PIXEL_VALUE, MAX_PIXEL_VALUE).astype(np.uint8)
    gray = np.empty(pixels.shape, dtype=BGRA32)
    gray["b"] = value
    gray["g"] = value
    gray["r"] = value
    gray["a"] = MAX_PIXEL_VALUE
    return gray


def to_bgra(src: Buffer, workers: Optional[int] = None) -> Buffer:
    """Переводит буфер float32 ([0, 1]) в непрозрачный серый BGRA32."""
    if src.dtype != FLOAT32:
        raise ValueError(f"to_bgra expects a float32 buffer, got {src.dtype}")
    return map_pixels(src, _opaque_gray, BGRA32, workers)


def corners_to_image(corners: Buffer, workers: Optional[int] = None) -> Buffer:
    """Бинарная карта углов -> изображение BGRA32: углы белые, фон чёрный."""
    return to_bgra(corners, workers)
