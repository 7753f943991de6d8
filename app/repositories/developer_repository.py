"""
Repository for Developer database operations
"""

from sqlalchemy import case, func
from models.developer import Developer
from .reference_repository import ReferenceRepository


class DeveloperRepository(ReferenceRepository):
    """Repository for Developer database operations"""

    model = Developer

    @classmethod
    def get_by_country(cls, country):
        """Get Developers based in a country (case-insensitive exact match)"""
        return (
            Developer.query.filter(func.lower(Developer.country) == country.lower())
            .order_by(Developer.name.asc(), Developer.id.asc())
            .all()
        )

    @classmethod
    def get_oldest_first(cls):
        """Get all Developers by founding date, oldest first; undated ones last"""
        return (
            Developer.query.order_by(
                case((Developer.founded_on.is_(None), 1), else_=0),
                Developer.founded_on.asc(),
                Developer.id.asc(),
            )
            .all()
        )
