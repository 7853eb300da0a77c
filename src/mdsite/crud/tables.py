"""Persisted incremental build state, one row per tracked repository"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.types import JSON
from sqlmodel import Field, SQLModel


class RepositoryState(SQLModel, table=True):
    __tablename__ = "repository_state"
    repo_id: str = Field(sa_column=Column(Text, primary_key=True))
    document_count: int = Field(default=0, nullable=False)
    doc_files_hash: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    doc_paths: Optional[list[str]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
