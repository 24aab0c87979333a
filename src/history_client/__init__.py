"""History and catalogue collaborators for the rest engine."""

from history_client.catalogue import DEFAULT_EXERCISES, StaticExerciseCatalogue, parse_difficulty
from history_client.client import InMemoryHistoryProvider, ResilientHistoryProvider
from history_client.profile_mapper import build_profile, map_profile, update_profile

__all__ = [
    "DEFAULT_EXERCISES",
    "InMemoryHistoryProvider",
    "ResilientHistoryProvider",
    "StaticExerciseCatalogue",
    "build_profile",
    "map_profile",
    "parse_difficulty",
    "update_profile",
]
