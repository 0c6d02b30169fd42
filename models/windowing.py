#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Библиотека оконных операторов над буферами.

Все операторы устроены одинаково: выходной буфер выделяется заранее, затем
строки разбиваются на полосы, и каждая полоса считается независимо от других
(только чтение входов, запись в свой срез выхода). Поэтому полосы можно
раздавать в пул потоков без блокировок; numpy отпускает GIL внутри векторных
операций.

Функции, передаваемые в операторы, векторные: они получают массив пикселей
полосы (или массив окон) и обрабатывают каждый пиксель независимо.
"""

import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union
import numpy as np
from config.settings import MAX_WORKERS, MIN_PARALLEL_PIXELS, ROWS_PER_TASK
from models.buffer import Buffer, FLOAT32
from models.numerics import clamp, reflect_indices


@dataclass(frozen=True)
class Point:
    """Координата пикселя."""
    x: int
    y: int


@dataclass(frozen=True)
class Range:
    """Прямоугольное окно от (x1, y1) до (x2, y2) включительно."""
    x1: int
    y1: int
    x2: int
    y2: int

    def __post_init__(self):
        if self.x2 < self.x1 or self.y2 < self.y1:
            raise ValueError(f"Empty range ({self.x1}, {self.y1})..({self.x2}, {self.y2})")

    @classmethod
    def centered(cls, center: Point, width: int, height: Optional[int] = None) -> "Range":
        """Окно нечётного размера с центром в заданной точке."""
        width, height = window_shape(width if height is None else (width, height))
        half_x, half_y = width // 2, height // 2
        return cls(center.x - half_x, center.y - half_y, center.x + half_x, center.y + half_y)

    @property
    def width(self) -> int:
        return self.x2 - self.x1 + 1

    @property
    def height(self) -> int:
        return self.y2 - self.y1 + 1


WindowSize = Union[int, Tuple[int, int]]


def window_shape(window: WindowSize) -> Tuple[int, int]:
    """
    Приводит размер окна к паре (ширина, высота) и проверяет его.

    Args:
        window: Нечётное число или пара нечётных чисел (ширина, высота)

    Returns:
        Кортеж (ширина, высота)
    """
    if np.ndim(window) == 0:
        width = height = window
    else:
        width, height = window
    for name, value in (("width", width), ("height", height)):
        if value <= 0 or value % 2 == 0:
            raise ValueError(f"Window {name} must be a positive odd number, got {value}")
    return int(width), int(height)


# ---- Раздача строк по потокам ----

def row_bands(height: int, rows_per_task: int = ROWS_PER_TASK) -> List[Tuple[int, int]]:
    """Разбивает [0, height) на полосы строк [lo, hi)."""
    rows_per_task = max(1, int(rows_per_task))
    return [(lo, min(lo + rows_per_task, height)) for lo in range(0, height, rows_per_task)]


def dispatch_rows(buffer_shape: Tuple[int, int], worker: Callable[[int, int], object],
                  workers: Optional[int] = None) -> list:
    """
    Выполняет worker(lo, hi) для каждой полосы строк.

    Маленькие изображения считаются в вызывающем потоке. Результаты
    возвращаются в порядке полос, исключения из задач пробрасываются.

    Args:
        buffer_shape: (высота, ширина) обрабатываемого буфера
        worker: Функция обработки полосы строк
        workers: Число потоков (None - из настроек или по числу CPU)

    Returns:
        Список результатов worker по полосам
    """
    height, width = buffer_shape
    bands = row_bands(height)
    if workers is None:
        workers = MAX_WORKERS or os.cpu_count() or 1
    max_workers = min(max(1, int(workers)), len(bands))

    if height * width < MIN_PARALLEL_PIXELS or max_workers == 1:
        return [worker(lo, hi) for lo, hi in bands]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures: List[Future] = [pool.submit(worker, lo, hi) for lo, hi in bands]
        return [future.result() for future in futures]


# ---- Поточечные операторы ----

def map_pixels(src: Buffer, func: Callable[[np.ndarray], np.ndarray],
               dtype=FLOAT32, workers: Optional[int] = None) -> Buffer:
    """
    Отображает каждый пиксель src в пиксель результата того же размера.

    Args:
        src: Исходный буфер
        func: Векторная функция пикселей полосы -> пиксели результата
        dtype: Тип элемента результата
        workers: Число потоков

    Returns:
        Новый буфер
    """
    dest = Buffer(src.width, src.height, dtype)
    src_pixels = src.pixels
    dest_pixels = dest.pixels

    def _rows(lo: int, hi: int) -> None:
        dest_pixels[lo:hi] = func(src_pixels[lo:hi])

    dispatch_rows(src.shape, _rows, workers)
    return dest


def combine(src1: Buffer, src2: Buffer, func: Callable[[np.ndarray, np.ndarray], np.ndarray],
            dtype=FLOAT32, workers: Optional[int] = None) -> Buffer:
    """Объединяет соответствующие пиксели двух буферов одного размера."""
    if not src1.same_size(src2):
        raise ValueError(
            f"src images must be the same size: {src1.width}x{src1.height} "
            f"vs {src2.width}x{src2.height}"
        )

    dest = Buffer(src1.width, src1.height, dtype)
    pixels1 = src1.pixels
    pixels2 = src2.pixels
    dest_pixels = dest.pixels

    def _rows(lo: int, hi: int) -> None:
        dest_pixels[lo:hi] = func(pixels1[lo:hi], pixels2[lo:hi])

    dispatch_rows(src1.shape, _rows, workers)
    return dest


def reduce_pixels(src: Buffer, initial, func: Callable, merge: Optional[Callable] = None,
                  workers: Optional[int] = None):
    """
    Сворачивает все пиксели буфера в одно значение.

    Каждая полоса сворачивается отдельно начиная с initial, затем частичные
    результаты объединяются через merge (по умолчанию та же func). Порядок
    обхода не гарантирован, поэтому func должна от него не зависеть.

    Args:
        src: Исходный буфер
        initial: Начальное значение аккумулятора
        func: func(acc, пиксели полосы) -> acc
        merge: merge(acc, частичный результат) -> acc
        workers: Число потоков

    Returns:
        Итоговое значение аккумулятора
    """
    merge = merge or func
    src_pixels = src.pixels
    partials = dispatch_rows(src.shape, lambda lo, hi: func(initial, src_pixels[lo:hi]), workers)

    acc = initial
    for partial in partials:
        acc = merge(acc, partial)
    return acc


# ---- Оконные операторы ----

def _reflected_block(pixels: np.ndarray, rng: Range) -> np.ndarray:
    """Копия прямоугольника rng; координаты вне изображения отражаются от краёв."""
    height, width = pixels.shape
    ys = reflect_indices(np.arange(rng.y1, rng.y2 + 1), 0, height - 1)
    xs = reflect_indices(np.arange(rng.x1, rng.x2 + 1), 0, width - 1)
    return pixels[np.ix_(ys, xs)]


def _clipped_block(pixels: np.ndarray, rng: Range, fill) -> np.ndarray:
    """Копия прямоугольника rng; пиксели вне изображения заменяются на fill."""
    height, width = pixels.shape
    block = np.full((rng.height, rng.width), fill, dtype=pixels.dtype)
    x1, x2 = clamp(rng.x1, 0, width - 1), clamp(rng.x2, 0, width - 1)
    y1, y2 = clamp(rng.y1, 0, height - 1), clamp(rng.y2, 0, height - 1)
    block[y1 - rng.y1:y2 - rng.y1 + 1, x1 - rng.x1:x2 - rng.x1 + 1] = pixels[y1:y2 + 1, x1:x2 + 1]
    return block


def _sliding_windows(block: np.ndarray, window_width: int, window_height: int) -> np.ndarray:
    """Все окна блока через stride_tricks (без доп. памяти): (H', W', wh, ww)."""
    out_height = block.shape[0] - window_height + 1
    out_width = block.shape[1] - window_width + 1
    shape = (out_height, out_width, window_height, window_width)
    strides = (block.strides[0], block.strides[1], block.strides[0], block.strides[1])
    return np.lib.stride_tricks.as_strided(block, shape=shape, strides=strides, writeable=False)


def reduce_range(src: Buffer, rng: Range, initial, func: Callable):
    """
    Сворачивает пиксели окна rng в одно значение.

    Args:
        src: Исходный буфер
        rng: Окно (может выходить за края не дальше чем на размер изображения)
        initial: Начальное значение аккумулятора
        func: func(acc, пиксели окна формы (высота, ширина)) -> acc

    Returns:
        Итоговое значение аккумулятора
    """
    return func(initial, _reflected_block(src.pixels, rng))


def map_windowed(src: Buffer, window: WindowSize,
                 init: Callable[[np.ndarray], np.ndarray],
                 reduce: Callable[[np.ndarray, np.ndarray], np.ndarray],
                 finalize: Optional[Callable[[np.ndarray], np.ndarray]] = None,
                 dtype=FLOAT32, workers: Optional[int] = None, fill=None) -> Buffer:
    """
    Для каждого пикселя сворачивает окно с центром в нём и пишет результат.

    Для каждой полосы строк строится блок с полями по краям, из него - окна
    всех пикселей полосы формы (строки, ширина, высота окна, ширина окна).
    По умолчанию поля заполняются отражением от краёв изображения. Если задан
    fill, поля заполняются этим значением и окно фактически обрезается
    границей изображения (например, fill=-inf для поиска максимума).

    Args:
        src: Исходный буфер
        window: Нечётный размер окна или пара (ширина, высота)
        init: Пиксели полосы -> начальные аккумуляторы
        reduce: (аккумуляторы, окна) -> аккумуляторы
        finalize: Аккумуляторы -> пиксели результата (по умолчанию как есть)
        dtype: Тип элемента результата
        workers: Число потоков
        fill: Значение для пикселей за краем вместо отражения

    Returns:
        Новый буфер того же размера
    """
    window_width, window_height = window_shape(window)
    width = src.width
    src_pixels = src.pixels
    dest = Buffer(src.width, src.height, dtype)
    dest_pixels = dest.pixels

    def _rows(lo: int, hi: int) -> None:
        first = Range.centered(Point(0, lo), window_width, window_height)
        last = Range.centered(Point(width - 1, hi - 1), window_width, window_height)
        rng = Range(first.x1, first.y1, last.x2, last.y2)
        if fill is None:
            block = _reflected_block(src_pixels, rng)
        else:
            block = _clipped_block(src_pixels, rng, fill)
        windows = _sliding_windows(block, window_width, window_height)
        acc = reduce(init(src_pixels[lo:hi]), windows)
        dest_pixels[lo:hi] = finalize(acc) if finalize is not None else acc

    dispatch_rows(src.shape, _rows, workers)
    return dest
