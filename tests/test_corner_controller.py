#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import cv2
import numpy as np
import pytest
from controllers.corner_controller import CornerController, highlight_corners, to_bgra_frame
from models.buffer import Buffer
from models.detectors import HarrisDetector


@pytest.fixture
def square_frame():
    frame = np.zeros((40, 40, 3), dtype=np.uint8)
    frame[14:26, 14:26] = 255
    return frame


@pytest.mark.parametrize("shape", [(8, 6), (8, 6, 3), (8, 6, 4)])
def test_to_bgra_frame(shape):
    frame = np.full(shape, 100, dtype=np.uint8)
    bgra = to_bgra_frame(frame)
    assert bgra.shape == (8, 6, 4)
    assert np.all(bgra[..., :3] == 100)


def test_to_bgra_frame_rejects_16_bit():
    with pytest.raises(ValueError):
        to_bgra_frame(np.zeros((4, 4), dtype=np.uint16))


def test_highlight_corners_draws_copy():
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    corners = np.zeros((20, 20), dtype=np.float32)
    corners[10, 10] = 1.0
    result = highlight_corners(Buffer.from_array(corners), image)

    assert not image.any()
    assert tuple(result[8, 10]) == (0, 0, 255)
    assert not result[0:5, 0:5].any()


def test_process_frame_counts_time(square_frame):
    controller = CornerController(HarrisDetector())
    corners, bgra, time_ms = controller.process_frame(square_frame)

    assert corners.shape == (40, 40)
    assert bgra.shape == (40, 40, 4)
    assert time_ms >= 0.0
    assert controller.frame_count == 1
    assert int(corners.to_array().sum()) == 4


def test_load_missing_file_fails(tmp_path):
    controller = CornerController(HarrisDetector())
    assert not controller.load_input(str(tmp_path / "missing.png"))


def test_run_on_image_writes_output(tmp_path, square_frame):
    input_path = tmp_path / "square.png"
    output_path = tmp_path / "corners.png"
    assert cv2.imwrite(str(input_path), square_frame)

    controller = CornerController(HarrisDetector())
    assert controller.load_input(str(input_path))
    assert not controller.is_video
    assert controller.run(output_path=str(output_path)) == 1

    written = cv2.imread(str(output_path))
    assert written is not None
    assert written.shape == (40, 40, 3)
    assert controller.average_time_ms == pytest.approx(controller.total_time_ms)
