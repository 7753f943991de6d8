"""Business logic for platforms, developers and genres."""
import logging
from typing import Dict, List

from sqlalchemy.exc import IntegrityError

from constants import KIND_DEVELOPER, KIND_GENRE, KIND_PLATFORM, REGION_CATALOG
from db import to_dict, unit_of_work
from exceptions import BusinessRuleException, DuplicateResourceException, NotFoundException, ValidationException
from metrics import catalog_writes_total
from repositories.developer_repository import DeveloperRepository
from repositories.platform_repository import PlatformRepository
from utils import isoformat_or_none
from view_cache import ViewCache

from .association_manager import AssociationManager, RESOURCE_NAMES, TARGET_REPOSITORIES

logger = logging.getLogger("main")

REFERENCE_KINDS = (KIND_PLATFORM, KIND_DEVELOPER, KIND_GENRE)


def reference_to_dict(item) -> Dict:
    data = to_dict(item)
    for key, value in data.items():
        if hasattr(value, "isoformat"):
            data[key] = isoformat_or_none(value)
    return data


class ReferenceDataService:
    """
    CRUD over the reference entities a game links to.

    Rules
    -----
    * ``name`` is unique per kind; create and rename fail with a conflict
      when another row already holds it.
    * Deleting a platform/developer/genre removes its links to games.
    * Listings are cached in the ``catalog`` region keyed by kind; writes of
      a kind drop that kind's entry only.
    """

    def __init__(self, cache: ViewCache, associations: AssociationManager = None) -> None:
        self.cache = cache
        self.associations = associations or AssociationManager()

    @staticmethod
    def _repository(kind):
        if kind not in TARGET_REPOSITORIES:
            raise BusinessRuleException(f"Unknown catalog kind '{kind}'")
        return TARGET_REPOSITORIES[kind]

    def _require(self, kind, id):
        item = self._repository(kind).get_by_id(id)
        if item is None:
            raise NotFoundException(RESOURCE_NAMES[kind], id)
        return item

    def _ensure_name_free(self, kind, name, own_id=None):
        existing = self._repository(kind).get_by_name(name)
        if existing is not None and existing.id != own_id:
            raise DuplicateResourceException(resource=RESOURCE_NAMES[kind], field="name", value=name)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self, kind: str) -> List[Dict]:
        repository = self._repository(kind)
        return self.cache.get_or_load(
            REGION_CATALOG, kind,
            lambda: [reference_to_dict(item) for item in repository.get_all()],
        )

    def get(self, kind: str, id: int) -> Dict:
        return reference_to_dict(self._require(kind, id))

    def search(self, kind: str, term: str) -> List[Dict]:
        if term is None or not str(term).strip():
            raise ValidationException("Search term cannot be blank")
        return [reference_to_dict(item) for item in self._repository(kind).search_by_name(term)]

    def games_for(self, kind: str, id: int) -> List[int]:
        """Ids of the games linked to a platform/developer/genre"""
        self._require(kind, id)
        return self.associations.find_associations_by_target(kind, id)

    def platforms_by_manufacturer(self, manufacturer: str) -> List[Dict]:
        if manufacturer is None or not str(manufacturer).strip():
            raise ValidationException("Manufacturer cannot be blank")
        return [reference_to_dict(item) for item in PlatformRepository.get_by_manufacturer(manufacturer.strip())]

    def platforms_newest_first(self) -> List[Dict]:
        return [reference_to_dict(item) for item in PlatformRepository.get_newest_first()]

    def developers_by_country(self, country: str) -> List[Dict]:
        if country is None or not str(country).strip():
            raise ValidationException("Country cannot be blank")
        return [reference_to_dict(item) for item in DeveloperRepository.get_by_country(country.strip())]

    def developers_oldest_first(self) -> List[Dict]:
        return [reference_to_dict(item) for item in DeveloperRepository.get_oldest_first()]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _name_conflict(self, kind, name, own_id):
        """Map a unique-name violation from a concurrent writer to a conflict"""
        existing = self._repository(kind).get_by_name(name)
        if existing is not None and existing.id != own_id:
            logger.warning(f"Duplicate {kind} name race: {name}")
            return DuplicateResourceException(resource=RESOURCE_NAMES[kind], field="name", value=name)
        return None

    def create(self, kind: str, fields: Dict) -> Dict:
        repository = self._repository(kind)
        try:
            with unit_of_work():
                self._ensure_name_free(kind, fields["name"])
                item = repository.create(**fields)
                result = reference_to_dict(item)
        except IntegrityError as e:
            conflict = self._name_conflict(kind, fields["name"], None)
            if conflict is None:
                raise
            raise conflict from e

        self.cache.evict(REGION_CATALOG, kind)
        catalog_writes_total.labels(entity=kind, operation="create").inc()
        logger.info(f"{RESOURCE_NAMES[kind]} {result['id']} created: {fields['name']}")
        return result

    def update(self, kind: str, id: int, fields: Dict) -> Dict:
        repository = self._repository(kind)
        try:
            with unit_of_work():
                self._require(kind, id)
                self._ensure_name_free(kind, fields["name"], own_id=id)
                item = repository.update(id, **fields)
                result = reference_to_dict(item)
        except IntegrityError as e:
            conflict = self._name_conflict(kind, fields["name"], id)
            if conflict is None:
                raise
            raise conflict from e

        self.cache.evict(REGION_CATALOG, kind)
        catalog_writes_total.labels(entity=kind, operation="update").inc()
        logger.info(f"{RESOURCE_NAMES[kind]} {id} updated")
        return result

    def delete(self, kind: str, id: int) -> None:
        repository = self._repository(kind)
        with unit_of_work():
            self._require(kind, id)
            unlinked = self.associations.cascade_delete_target(kind, id)
            repository.delete(id)

        self.cache.evict(REGION_CATALOG, kind)
        catalog_writes_total.labels(entity=kind, operation="delete").inc()
        logger.info(f"{RESOURCE_NAMES[kind]} {id} deleted ({unlinked} game links removed)")
