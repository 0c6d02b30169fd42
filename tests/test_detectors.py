#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest
from conftest import padded_buffer
from models.buffer import BGRA32, Buffer
from models.conversion import to_luminance
from models.detectors import CornerDetector, HarrisDetector, OpenCVHarrisDetector
from models.harris import harris_corners


def test_detector_is_abstract():
    with pytest.raises(TypeError):
        CornerDetector()


def test_defaults():
    detector = HarrisDetector()
    assert (detector.smoothing_size, detector.structure_size, detector.suppression_size) == (5, 5, 9)
    assert detector.harris_k == pytest.approx(0.04)
    assert detector.threshold_ratio == pytest.approx(0.5)
    assert "HarrisDetector" in repr(detector)


@pytest.mark.parametrize("detector_class", [HarrisDetector, OpenCVHarrisDetector])
@pytest.mark.parametrize("params", [
    dict(smoothing_size=2),
    dict(structure_size=0),
    dict(suppression_size=10),
    dict(harris_k=-1.0),
    dict(threshold_ratio=2.0),
])
def test_validation_at_construction(detector_class, params):
    with pytest.raises(ValueError):
        detector_class(**params)


def test_opencv_detector_limits_aperture():
    with pytest.raises(ValueError):
        OpenCVHarrisDetector(smoothing_size=9)


def test_harris_detector_matches_pipeline(square_image):
    detector = HarrisDetector(threshold_ratio=0.3, workers=2)
    expected = harris_corners(square_image, threshold_ratio=0.3)
    assert np.array_equal(detector.find_corners(square_image).to_array(), expected.to_array())


def test_detect_converts_color_input():
    image = np.zeros((40, 40, 4), dtype=np.uint8)
    image[..., 3] = 255
    image[14:26, 14:26, :3] = 255
    corners = HarrisDetector().detect(Buffer.from_array(image))
    ys, xs = np.nonzero(corners.to_array())
    assert set(zip(xs.tolist(), ys.tolist())) == {(15, 15), (24, 15), (15, 24), (24, 24)}


def test_opencv_detector_output_is_binary(square_image):
    corners = OpenCVHarrisDetector(smoothing_size=3, structure_size=3).find_corners(square_image)
    values = corners.to_array()
    assert corners.shape == square_image.shape
    assert set(np.unique(values).tolist()) <= {0.0, 1.0}
    assert values.sum() >= 4


def test_padded_bgra_rows_give_same_corners():
    image = np.zeros((40, 40, 4), dtype=np.uint8)
    image[..., 3] = 255
    image[14:26, 14:26, :3] = (40, 180, 220)
    padded = padded_buffer(image, BGRA32, padding=20)
    packed = Buffer.from_array(image)
    assert padded.stride == 40 * 4 + 20

    padded_luminance = to_luminance(padded)
    packed_luminance = to_luminance(packed)
    assert np.array_equal(padded_luminance.to_array(), packed_luminance.to_array())

    detector = HarrisDetector()
    corners = detector.find_corners(padded_luminance).to_array()
    assert np.array_equal(corners, detector.find_corners(packed_luminance).to_array())
    assert np.array_equal(detector.detect(padded).to_array(), corners)

    ys, xs = np.nonzero(corners)
    assert set(zip(xs.tolist(), ys.tolist())) == {(15, 15), (24, 15), (15, 24), (24, 24)}
