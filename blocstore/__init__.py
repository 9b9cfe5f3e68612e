"""Block-structured binary files, fixed-size record files, text line files and small helpers."""

__version__ = "1.0.0"
__all__ = ["blockfile", "blockformat", "errors", "fileops", "pathinfo", "point", "records", "stringlist"]