#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest
from models.buffer import BGRA32, Buffer, FLOAT32, STRUCTURE_TENSOR


def test_new_buffer_is_zero_filled():
    buffer = Buffer(4, 3)
    assert buffer.shape == (3, 4)
    assert buffer.stride == 16
    assert buffer.dtype == FLOAT32
    assert np.all(buffer.pixels == 0.0)


@pytest.mark.parametrize("width, height", [(0, 1), (1, 0), (-2, 3)])
def test_invalid_dimensions(width, height):
    with pytest.raises(ValueError):
        Buffer(width, height)


def test_stride_too_small():
    with pytest.raises(ValueError):
        Buffer(4, 2, FLOAT32, stride=12)


def test_from_bytes_respects_padded_stride():
    # Две строки по 2 float32 и 4 байта заполнения в конце каждой строки
    rows = [np.array([1.0, 2.0], dtype=np.float32), np.array([3.0, 4.0], dtype=np.float32)]
    data = b"".join(row.tobytes() + b"\xff" * 4 for row in rows)
    buffer = Buffer.from_bytes(data, 2, 2, stride=12)

    assert buffer.stride == 12
    assert buffer.row(0).tolist() == [1.0, 2.0]
    assert buffer.row(1).tolist() == [3.0, 4.0]
    assert buffer.to_array().tolist() == [[1.0, 2.0], [3.0, 4.0]]


def test_from_bytes_validates_size():
    with pytest.raises(ValueError):
        Buffer.from_bytes(b"\x00" * 15, 2, 2, stride=8)


def test_from_bytes_copies_data():
    data = bytearray(np.array([1.0], dtype=np.float32).tobytes())
    buffer = Buffer.from_bytes(data, 1, 1, stride=4)
    data[:] = b"\x00" * 4
    assert buffer.pixels[0, 0] == 1.0


def test_row_out_of_range():
    with pytest.raises(IndexError):
        Buffer(2, 2).row(2)


def test_from_array_bgra():
    image = np.zeros((2, 3, 4), dtype=np.uint8)
    image[..., 0] = 10   # B
    image[..., 1] = 20   # G
    image[..., 2] = 30   # R
    image[..., 3] = 255  # A
    buffer = Buffer.from_array(image)

    assert buffer.dtype == BGRA32
    assert buffer.shape == (2, 3)
    assert np.all(buffer.pixels["b"] == 10)
    assert np.all(buffer.pixels["r"] == 30)
    assert np.all(buffer.pixels["a"] == 255)


def test_from_array_rejects_other_shapes():
    with pytest.raises(ValueError):
        Buffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))


def test_structure_tensor_pixels_default_to_zero():
    buffer = Buffer(2, 2, STRUCTURE_TENSOR)
    assert buffer.stride == 24
    for field in ("xx", "yy", "xy"):
        assert np.all(buffer.pixels[field] == 0.0)
