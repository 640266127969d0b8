"""Declarative base shared by the tags, users and user_tags tables.

``Base.metadata`` is what ``main`` uses to create the schema on startup
and what the test fixtures create and drop per test.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
