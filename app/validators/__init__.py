"""
app/validators package marker.
"""

from app.validators.book_validator import BookRowValidator

__all__ = [
    "BookRowValidator",
]
