from .loader import DeckLoadResult, load_deck, parse_deck

__all__ = ["DeckLoadResult", "load_deck", "parse_deck"]
