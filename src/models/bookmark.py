"""Bookmark model for storing bookmarks."""
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

# Range of a PostgreSQL INTEGER column; ids and ratings outside it cannot be stored
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1


class Bookmark(Base):
    """
    Bookmark model - stores a URL with a title, description, and rating.

    `title` and `description` are stored already sanitized; the API sanitizes
    on write and trusts stored values on read.
    """

    __tablename__ = "bookmarks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
