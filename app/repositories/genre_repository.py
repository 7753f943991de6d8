"""
Repository for Genre database operations
"""

from models.genre import Genre
from .reference_repository import ReferenceRepository


class GenreRepository(ReferenceRepository):
    """Repository for Genre database operations"""

    model = Genre
