#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest
from models.numerics import ReflectionError, clamp, reflect, reflect_indices


def test_clamp():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(2, 0, 3) == 2
    assert clamp(0.5, 0.0, 1.0) == 0.5


@pytest.mark.parametrize("value", range(0, 10))
def test_reflect_in_range_is_identity(value):
    assert reflect(value, 0, 9) == value


def test_reflect_mirrors_about_edges():
    assert reflect(-1, 0, 9) == 1
    assert reflect(-2, 0, 9) == 2
    assert reflect(10, 0, 9) == 8
    assert reflect(11, 0, 9) == 7
    assert reflect(3, 5, 9) == 7


def test_reflect_requires_single_step():
    with pytest.raises(ReflectionError):
        reflect(-10, 0, 9)
    with pytest.raises(ReflectionError):
        reflect(19, 0, 9)
    with pytest.raises(ReflectionError):
        reflect(1, 0, 0)


def test_reflection_error_is_runtime_error():
    assert issubclass(ReflectionError, RuntimeError)


def test_reflect_indices_matches_scalar():
    values = np.arange(-4, 14)
    expected = [reflect(int(v), 0, 9) for v in values]
    assert reflect_indices(values, 0, 9).tolist() == expected


def test_reflect_indices_rejects_far_values():
    with pytest.raises(ReflectionError):
        reflect_indices(np.array([-3, 0, 1]), 0, 2)
