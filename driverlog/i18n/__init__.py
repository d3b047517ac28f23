# -*- coding: utf-8 -*-
"""
Internationalization (i18n) module for Driver Log.

This module provides translation functions and language management.
Supports English and Portuguese with automatic system locale detection.
"""

import locale
from typing import List

from driverlog.i18n.translations import MONTH_NAMES, TRANSLATIONS

# Supported languages
SUPPORTED_LANGUAGES = ["en", "pt"]

# Current language (default to English)
_current_language = "en"


def detect_system_language() -> str:
    """
    Detect the system language and return a supported language code.

    Returns:
        'pt' if Portuguese is detected, 'en' otherwise.
    """
    system_locale = locale.getlocale()[0]
    if system_locale and system_locale.lower().startswith('pt'):
        return 'pt'
    return 'en'


def get_language() -> str:
    """Get the current language code."""
    return _current_language


def set_language(lang: str) -> None:
    """
    Set the current language.

    Args:
        lang: Language code ('en', 'pt' or 'auto')
    """
    global _current_language
    if lang == 'auto':
        lang = detect_system_language()
    if lang not in SUPPORTED_LANGUAGES:
        lang = 'en'
    _current_language = lang


def tr(key: str, **kwargs) -> str:
    """
    Get the translated string for the given key.

    Args:
        key: Translation key (e.g., 'validation.route_id_required')
        **kwargs: Format arguments for string interpolation

    Returns:
        Translated string, or the key itself if not found.
    """
    translations = TRANSLATIONS.get(_current_language, TRANSLATIONS['en'])
    text = translations.get(key, TRANSLATIONS['en'].get(key, key))

    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, ValueError):
            pass

    return text


def month_name(month: int) -> str:
    """Full month name (1-12) in the current language."""
    return MONTH_NAMES[_current_language][month - 1]


def get_available_languages() -> List[tuple]:
    """
    Get list of available languages for display.

    Returns:
        List of (code, display_name) tuples.
    """
    return [
        ('en', 'English'),
        ('pt', 'Português'),
    ]
