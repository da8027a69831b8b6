from pathlib import Path


class Image2AsciiError(Exception):
    """Base class for recoverable rendering errors."""


class ImageDecodeError(Image2AsciiError):
    def __init__(self, path: str | Path):
        self.path = path
        super().__init__(f"can not open file {path}")


class FontLoadError(Image2AsciiError):
    def __init__(self, path: str | Path):
        self.path = path
        super().__init__(f"can not load font {path}")
