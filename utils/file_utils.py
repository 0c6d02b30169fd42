#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Утилиты для работы с файлами.
"""

import os
from config.settings import SUPPORTED_FORMATS, VIDEO_FORMATS


def _extension(path: str) -> str:
    _, ext = os.path.splitext(path.lower())
    return ext


def is_image_path(path: str) -> bool:
    """Проверяет расширение изображения (без проверки существования)."""
    return _extension(path) in SUPPORTED_FORMATS


def is_video_path(path: str) -> bool:
    """Проверяет расширение видео (без проверки существования)."""
    return _extension(path) in VIDEO_FORMATS


def validate_input_path(path: str) -> bool:
    """
    Проверяет, является ли путь существующим изображением или видео.

    Args:
        path: Путь к файлу

    Returns:
        True если файл валиден, False иначе
    """
    if not os.path.exists(path):
        return False
    return is_image_path(path) or is_video_path(path)


def validate_output_path(path: str, video_input: bool) -> bool:
    """
    Проверяет формат выходного файла: видео для видео, изображение для изображения.

    Args:
        path: Путь для сохранения
        video_input: Является ли вход видео

    Returns:
        True если формат подходит
    """
    if video_input:
        return is_video_path(path)
    return is_image_path(path)


def get_supported_formats_string() -> str:
    """
    Возвращает строку с поддерживаемыми форматами.

    Returns:
        Строка с форматами
    """
    return ", ".join(SUPPORTED_FORMATS + VIDEO_FORMATS)
