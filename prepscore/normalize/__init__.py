from .text import NormalizedText, normalize, normalize_text, strip_declaration, tokenize

__all__ = ["NormalizedText", "normalize", "normalize_text", "strip_declaration", "tokenize"]
