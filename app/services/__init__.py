"""Services package - expose the catalog services from one import."""
from .rating_aggregator import Aggregate, RatingAggregator, average_of
from .association_manager import AssociationManager
from .interaction_guard import CallerContext, InteractionGuard
from .catalog_service import CatalogService
from .reference_service import ReferenceDataService

__all__ = [
    'Aggregate',
    'RatingAggregator',
    'average_of',
    'AssociationManager',
    'CallerContext',
    'InteractionGuard',
    'CatalogService',
    'ReferenceDataService',
]
