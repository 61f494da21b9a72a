"""Database base and model registry."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


# Import model modules here so metadata.create_all sees every table
from mocktest.models import attempt, mock_test  # noqa: E402, F401
