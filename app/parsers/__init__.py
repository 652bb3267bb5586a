"""
app/parsers package marker.
"""

from app.parsers.book_file_parser import SUPPORTED_EXTENSIONS, file_extension, parse_book_file

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "file_extension",
    "parse_book_file",
]
