"""
Request payload parsing for catalog writes.

Turns decoded JSON bodies into the specs the services consume. Missing or
malformed fields raise ValidationException; domain rules (score range,
non-empty association sets, unique names) are checked by the services.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from constants import KIND_DEVELOPER, KIND_GENRE, KIND_PLATFORM
from exceptions import ValidationException


def _require(payload, key):
    if not isinstance(payload, dict):
        raise ValidationException("Request body must be a JSON object")
    if key not in payload or payload[key] is None:
        raise ValidationException(f"Missing required field: {key}")
    return payload[key]


def _parse_date(value, key):
    if value is None:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationException(f"Field {key} must be an ISO date (YYYY-MM-DD)")


def _parse_int(value, key):
    """Accept ints, whole-number floats and digit strings; never truncate"""
    if isinstance(value, bool):
        raise ValidationException(f"Field {key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationException(f"Field {key} must be an integer")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationException(f"Field {key} must be an integer")
    raise ValidationException(f"Field {key} must be an integer")


def _parse_id_list(value, key):
    if not isinstance(value, list):
        raise ValidationException(f"Field {key} must be a list of ids")
    return [_parse_int(item, key) for item in value]


def _parse_text(value, key, required=True):
    if value is None:
        if required:
            raise ValidationException(f"Missing required field: {key}")
        return None
    if not isinstance(value, str):
        raise ValidationException(f"Field {key} must be a string")
    value = value.strip()
    if required and not value:
        raise ValidationException(f"Field {key} cannot be blank")
    return value


@dataclass
class GameSpec:
    name: str
    description: str
    cover_image: Optional[str]
    release_date: date
    platform_ids: List[int] = field(default_factory=list)
    developer_ids: List[int] = field(default_factory=list)
    genre_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload):
        return cls(
            name=_parse_text(_require(payload, "name"), "name"),
            description=_parse_text(payload.get("description", ""), "description", required=False) or "",
            cover_image=_parse_text(payload.get("cover_image"), "cover_image", required=False),
            release_date=_parse_date(_require(payload, "release_date"), "release_date"),
            platform_ids=_parse_id_list(_require(payload, "platform_ids"), "platform_ids"),
            developer_ids=_parse_id_list(_require(payload, "developer_ids"), "developer_ids"),
            genre_ids=_parse_id_list(_require(payload, "genre_ids"), "genre_ids"),
        )

    def fields(self) -> Dict:
        return {
            "name": self.name,
            "description": self.description,
            "cover_image": self.cover_image,
            "release_date": self.release_date,
        }

    def associations(self) -> Dict[str, List[int]]:
        return {
            KIND_PLATFORM: list(self.platform_ids),
            KIND_DEVELOPER: list(self.developer_ids),
            KIND_GENRE: list(self.genre_ids),
        }


@dataclass
class InteractionSpec:
    game_id: Optional[int]
    score: Optional[int] = None
    review: Optional[str] = None
    played: bool = False

    @classmethod
    def from_payload(cls, payload, require_game=True):
        if require_game:
            game_id = _parse_int(_require(payload, "game_id"), "game_id")
        else:
            if not isinstance(payload, dict):
                raise ValidationException("Request body must be a JSON object")
            game_id = payload.get("game_id")
            game_id = _parse_int(game_id, "game_id") if game_id is not None else None
        score = payload.get("score")
        if score is not None:
            score = _parse_int(score, "score")
        played = payload.get("played", False)
        if not isinstance(played, bool):
            raise ValidationException("Field played must be a boolean")
        return cls(
            game_id=game_id,
            score=score,
            review=_parse_text(payload.get("review"), "review", required=False),
            played=played,
        )


# Accepted fields per reference kind: name -> parser
REFERENCE_FIELDS = {
    KIND_PLATFORM: {
        "release_year": _parse_int,
        "manufacturer": lambda value, key: _parse_text(value, key, required=False),
        "logo_image": lambda value, key: _parse_text(value, key, required=False),
    },
    KIND_DEVELOPER: {
        "founded_on": _parse_date,
        "country": lambda value, key: _parse_text(value, key, required=False),
    },
    KIND_GENRE: {
        "description": lambda value, key: _parse_text(value, key, required=False),
    },
}


def parse_reference_fields(kind, payload) -> Dict:
    """Parse a platform/developer/genre body; ``name`` is always required"""
    fields = {"name": _parse_text(_require(payload, "name"), "name")}
    for key, parser in REFERENCE_FIELDS[kind].items():
        value = payload.get(key)
        fields[key] = parser(value, key) if value is not None else None
    return fields
