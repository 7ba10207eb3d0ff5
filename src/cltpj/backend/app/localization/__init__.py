"""Translation helpers shared by the services and routes."""

from .catalog import Translator, get_translator, load_translations, normalise_locale

__all__ = ["Translator", "get_translator", "load_translations", "normalise_locale"]
