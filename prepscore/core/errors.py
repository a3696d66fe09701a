from __future__ import annotations


class PrepscoreError(RuntimeError):
    """Failure that aborts a request; everything else is reported as data."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class UnsupportedFormatError(PrepscoreError):
    status_code = 415


class DocumentDecodeError(PrepscoreError):
    status_code = 422


class ConfigError(PrepscoreError):
    status_code = 400
