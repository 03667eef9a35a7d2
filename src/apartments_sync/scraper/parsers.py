# scraper/parsers.py
"""
Парсеры для извлечения чисел из текстовых фрагментов карточки квартиры.

Все функции тотальные: на любой строке возвращают значение, не бросают.
"""
import json
import math
import re
from typing import Iterable, Optional

_NON_DIGITS = re.compile(r'[^0-9]')
_NON_NUMERIC = re.compile(r'[^0-9.]')
_FLOAT_PREFIX = re.compile(r'^\d*(?:\.\d*)?')


def clean_text(text: Optional[str]) -> str:
    """Обрезает пробелы; None -> ""."""
    return (text or "").strip()


def parse_int(text: Optional[str]) -> int:
    """
    Парсит целое число, выбрасывая все нецифровые символы.

    Примеры:
        "3 istabas" -> 3
        "5. stāvs" -> 5
        "—" -> 0
    """
    digits = _NON_DIGITS.sub('', text or '')
    if not digits:
        return 0
    try:
        return int(digits)
    except ValueError:
        # Длина строки сверх лимита int() в CPython
        return 0


def parse_float(text: Optional[str]) -> float:
    """
    Парсит дробное число, оставляя только цифры и точки.

    Строка с несколькими точками не отвергается: берётся самый длинный
    корректный префикс ("1.2.3" -> 1.2). Это эвристика, а не проверка.

    Примеры:
        "54.3 m²" -> 54.3
        "€ 129 900" -> 129900.0
        "cena pēc pieprasījuma" -> 0.0
    """
    numeric = _NON_NUMERIC.sub('', text or '')
    prefix = _FLOAT_PREFIX.match(numeric).group(0)
    if not prefix or prefix == '.':
        return 0.0
    value = float(prefix)
    if not math.isfinite(value):
        return 0.0
    return value


def normalize_floor(raw: int) -> int:
    """
    Нормализует этаж.

    Вёрстка иногда склеивает этаж с этажностью ("12/16" -> 1216).
    Значения больше 999 считаются такой склейкой: оставляем первые две цифры.
    """
    if raw > 999:
        return int(str(raw)[:2])
    return raw


def encode_tags(labels: Iterable[Optional[str]]) -> str:
    """Кодирует непустые метки в JSON-массив; без меток -> "[]"."""
    cleaned = [clean_text(label) for label in labels]
    return json.dumps([label for label in cleaned if label], ensure_ascii=False)
