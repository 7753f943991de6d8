"""
Models package

One model per module; join entities are named after the pair they link:
- game.py, platform.py, developer.py, genre.py
- gameplatform.py, gamedeveloper.py, gamegenre.py
- interaction.py, user.py
"""

from .game import Game
from .platform import Platform
from .developer import Developer
from .genre import Genre
from .gameplatform import GamePlatform
from .gamedeveloper import GameDeveloper
from .gamegenre import GameGenre
from .interaction import Interaction
from .user import User

__all__ = [
    "Game",
    "Platform",
    "Developer",
    "Genre",
    "GamePlatform",
    "GameDeveloper",
    "GameGenre",
    "Interaction",
    "User",
]
