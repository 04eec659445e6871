"""Import all models so Base.metadata sees every table."""
from wordflight_chat.infrastructure.db.models.message import MessageModel
from wordflight_chat.infrastructure.db.models.room import RoomModel

__all__ = [
    "MessageModel",
    "RoomModel",
]
