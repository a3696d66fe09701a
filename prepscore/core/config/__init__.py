from .settings import Settings, normalization_clock, settings

__all__ = ["Settings", "settings", "normalization_clock"]
