#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Демонстрация детектора углов Харриса.

Использование:
    python main.py image.png                      # найти углы и вывести статистику
    python main.py image.png --show               # показать углы в окне
    python main.py video.mp4 -o corners.mp4       # сохранить видео с отметками
    python main.py image.png --opencv             # эталонная реализация OpenCV
"""

import sys
import argparse
from config.settings import *
from controllers.corner_controller import CornerController
from models.detectors import HarrisDetector, OpenCVHarrisDetector
from utils.file_utils import get_supported_formats_string, validate_input_path, validate_output_path


def parse_arguments(argv=None):
    """
    Парсит аргументы командной строки.

    Args:
        argv: Список аргументов (по умолчанию sys.argv)

    Returns:
        Объект с аргументами
    """
    parser = argparse.ArgumentParser(
        description="Harris Corner Detector Demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Поддерживаемые форматы: {get_supported_formats_string()}",
    )

    parser.add_argument("input", help="Входное изображение или видео")
    parser.add_argument("-o", "--output",
                        help="Сохранить вход с отметками углов (изображение или видео)")
    parser.add_argument("-s", "--show", action="store_true",
                        help="Показать окно с отмеченными углами")
    parser.add_argument("--smoothing", type=int, default=DEFAULT_SMOOTHING_SIZE,
                        help="Размер гауссова ядра сглаживания (нечётный)")
    parser.add_argument("--structure", type=int, default=DEFAULT_STRUCTURE_SIZE,
                        help="Размер окна тензора структуры (нечётный)")
    parser.add_argument("--suppression", type=int, default=DEFAULT_SUPPRESSION_SIZE,
                        help="Размер окна подавления немаксимумов (нечётный)")
    parser.add_argument("-k", "--harris-k", type=float, default=DEFAULT_HARRIS_K,
                        help="Свободный параметр Харриса")
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD_RATIO,
                        help="Порог отклика как доля от максимального значения")
    parser.add_argument("--opencv", action="store_true",
                        help="Использовать реализацию OpenCV вместо собственной")
    parser.add_argument("--workers", type=int, default=MAX_WORKERS,
                        help="Число потоков для обработки строк")

    return parser.parse_args(argv)


def create_detector(args):
    """Создаёт детектор по аргументам; неверные параметры дают ValueError."""
    params = dict(
        smoothing_size=args.smoothing,
        structure_size=args.structure,
        harris_k=args.harris_k,
        threshold_ratio=args.threshold,
        suppression_size=args.suppression,
    )
    if args.opencv:
        return OpenCVHarrisDetector(**params)
    return HarrisDetector(workers=args.workers, **params)


def main(argv=None) -> int:
    """Главная функция приложения."""
    try:
        args = parse_arguments(argv)
        detector = create_detector(args)

        if not validate_input_path(args.input):
            print(f"Ошибка: Неверный путь или формат файла: {args.input}")
            return 2

        controller = CornerController(detector)
        if not controller.load_input(args.input):
            print(f"Ошибка: Не удалось загрузить файл: {args.input}")
            return 2

        if args.output and not validate_output_path(args.output, controller.is_video):
            print(f"Ошибка: Неподходящий формат выходного файла: {args.output}")
            return 1

        print(f"Загружено: {args.input}")
        print(f"Детектор: {detector}")
        controller.run(show=args.show, output_path=args.output)
        return 0

    except KeyboardInterrupt:
        print("\nПриложение прервано пользователем")
        return 1
    except Exception as e:
        print(f"Ошибка: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
