"""Time-versioned snapshot storage for players and teams."""

from blaseball.db.database import Database, IngestionError
from blaseball.db.history import History
from blaseball.db.models import Player, Team

__all__ = ["Database", "History", "IngestionError", "Player", "Team"]
