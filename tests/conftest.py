#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Общие фикстуры: синтетические изображения без файлов на диске.
"""

import numpy as np
import pytest
from models.buffer import Buffer


def float_buffer(array) -> Buffer:
    return Buffer.from_array(np.asarray(array, dtype=np.float32))


def padded_buffer(array, dtype, padding: int = 12) -> Buffer:
    """Буфер, у которого после каждой строки лежат байты-заполнители."""
    array = np.ascontiguousarray(array)
    rows = [row.tobytes() + b"\xee" * padding for row in array]
    return Buffer.from_bytes(b"".join(rows), array.shape[1], array.shape[0], len(rows[0]), dtype)


@pytest.fixture
def quadrant_image():
    """Яркий квадрант в правом нижнем углу: один угол в точке (16, 16)."""
    image = np.zeros((32, 32), dtype=np.float32)
    image[16:, 16:] = 1.0
    return float_buffer(image)


@pytest.fixture
def square_image():
    """Яркий квадрат 12x12 (пиксели 14..25): четыре угла."""
    image = np.zeros((40, 40), dtype=np.float32)
    image[14:26, 14:26] = 1.0
    return float_buffer(image)


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(1234)
    return float_buffer(rng.random((48, 64)))
