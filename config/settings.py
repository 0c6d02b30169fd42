#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Конфигурационные настройки детектора углов.
"""

# Параметры детектора Харриса по умолчанию
DEFAULT_SMOOTHING_SIZE = 5     # размер гауссова ядра (нечётный)
DEFAULT_STRUCTURE_SIZE = 5     # окно тензора структуры (нечётный)
DEFAULT_SUPPRESSION_SIZE = 9   # окно подавления немаксимумов (нечётный)
DEFAULT_HARRIS_K = 0.04        # свободный параметр Харриса
DEFAULT_THRESHOLD_RATIO = 0.5  # порог как доля от максимального отклика

# Яркость по Rec.709 (как для sRGB)
LUMA_WEIGHTS = {
    "r": 0.2126,
    "g": 0.7152,
    "b": 0.0722,
}

# Диапазоны значений
MAX_PIXEL_VALUE = 255
MIN_PIXEL_VALUE = 0

# Параллельная обработка строк
MAX_WORKERS = None             # None -> os.cpu_count()
ROWS_PER_TASK = 16             # строк в одной задаче пула
MIN_PARALLEL_PIXELS = 65_536   # меньше - считаем в вызывающем потоке

# Отображение углов
CORNER_BLOCK_SIZE = 5
CORNER_LINE_THICKNESS = 2
COLOR_RED = (0, 0, 255)

# Названия окон
WINDOW_NAMES = {
    "CORNERS": "Corners",
}

# Поддерживаемые форматы
SUPPORTED_FORMATS = ['.bmp', '.png', '.tiff', '.tif', '.jpg', '.jpeg']
VIDEO_FORMATS = ['.mp4', '.m4v', '.avi', '.mov']
VIDEO_FOURCC = "mp4v"
VIDEO_DEFAULT_FPS = 30.0
