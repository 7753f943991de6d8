"""
Repositories package

Each repository encapsulates database operations for a model. Repositories
stage changes and flush; committing belongs to the service-level unit of
work (``db.unit_of_work``).

Usage:
    from repositories.game_repository import GameRepository
    game = GameRepository.get_by_id(1)
"""
