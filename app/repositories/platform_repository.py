"""
Repository for Platform database operations
"""

from sqlalchemy import case, func
from models.platform import Platform
from .reference_repository import ReferenceRepository


class PlatformRepository(ReferenceRepository):
    """Repository for Platform database operations"""

    model = Platform

    @classmethod
    def get_by_manufacturer(cls, manufacturer):
        """Get Platforms built by a manufacturer (case-insensitive exact match)"""
        return (
            Platform.query.filter(func.lower(Platform.manufacturer) == manufacturer.lower())
            .order_by(Platform.name.asc(), Platform.id.asc())
            .all()
        )

    @classmethod
    def get_newest_first(cls):
        """Get all Platforms by release year, newest first; undated ones last"""
        return (
            Platform.query.order_by(
                case((Platform.release_year.is_(None), 1), else_=0),
                Platform.release_year.desc(),
                Platform.id.asc(),
            )
            .all()
        )
