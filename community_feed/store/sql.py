"""SQLAlchemy implementation of the remote data store."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import create_session
from ..errors import FetchError, WriteError
from ..models import Comment, Devotional, Like, Post, Profile
from .base import (
    COMMENTS,
    DEVOTIONALS,
    EMBED_AUTHOR,
    EMBED_COMMENT_COUNT,
    EMBED_LIKE_COUNT,
    LIKES,
    POSTS,
    PROFILES,
    Order,
    Row,
)

logger = logging.getLogger(__name__)

_TABLES: dict[str, type] = {
    POSTS: Post,
    COMMENTS: Comment,
    LIKES: Like,
    PROFILES: Profile,
    DEVOTIONALS: Devotional,
}


def _model_for(table: str) -> type:
    try:
        return _TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table}") from None


def _column(model: type, name: str):
    if name not in model.__table__.columns:
        raise ValueError(f"Unknown column {name!r} on {model.__tablename__}")
    return getattr(model, name)


def _to_row(instance: Any) -> Row:
    return {column.name: getattr(instance, column.name) for column in instance.__table__.columns}


def _apply_filters(statement, model: type, filters: Mapping[str, Any] | None):
    for name, value in (filters or {}).items():
        column = _column(model, name)
        if value is None:
            statement = statement.where(column.is_(None))
        elif isinstance(value, (list, tuple, set, frozenset)):
            statement = statement.where(column.in_(list(value)))
        else:
            statement = statement.where(column == value)
    return statement


class SqlRemoteStore:
    """Table-scoped CRUD over the ORM models, one session per call."""

    def __init__(self, session_factory: Callable[[], Session] = create_session) -> None:
        self._session_factory = session_factory

    async def query(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order: Order | None = None,
        embed: Sequence[str] = (),
        limit: int | None = None,
    ) -> list[Row]:
        model = _model_for(table)
        unsupported = set(embed) - {EMBED_AUTHOR, EMBED_COMMENT_COUNT, EMBED_LIKE_COUNT}
        if unsupported or (embed and model is not Post):
            raise ValueError(f"Unsupported embed {sorted(embed)} for {table}")

        statement = select(model)
        if EMBED_AUTHOR in embed:
            statement = statement.add_columns(
                Profile.id.label("author_id"),
                Profile.username.label("author_username"),
                Profile.avatar_url.label("author_avatar_url"),
            ).outerjoin(Profile, Profile.id == Post.user_id)
        if EMBED_COMMENT_COUNT in embed:
            comment_count = select(func.count(Comment.id)).where(Comment.post_id == Post.id).scalar_subquery()
            statement = statement.add_columns(comment_count.label("embedded_comment_count"))
        if EMBED_LIKE_COUNT in embed:
            like_count = select(func.count(Like.id)).where(Like.post_id == Post.id).scalar_subquery()
            statement = statement.add_columns(like_count.label("embedded_like_count"))

        statement = _apply_filters(statement, model, filters)
        if order is not None:
            column = _column(model, order.column)
            statement = statement.order_by(column.asc() if order.ascending else column.desc())
        if limit is not None:
            statement = statement.limit(limit)

        with self._session_factory() as session:
            try:
                results = session.execute(statement).all()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Query against %s failed", table)
                raise FetchError(f"Failed to load {table}") from exc

        rows: list[Row] = []
        for result in results:
            mapping = result._mapping
            row = _to_row(result[0])
            if EMBED_AUTHOR in embed:
                author_id = mapping["author_id"]
                row["author"] = (
                    {
                        "id": author_id,
                        "username": mapping["author_username"],
                        "avatar_url": mapping["author_avatar_url"],
                    }
                    if author_id is not None
                    else None
                )
            if EMBED_COMMENT_COUNT in embed:
                row["comment_count"] = int(mapping["embedded_comment_count"] or 0)
            if EMBED_LIKE_COUNT in embed:
                row["like_count"] = int(mapping["embedded_like_count"] or 0)
            rows.append(row)
        return rows

    async def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        model = _model_for(table)
        instance = model(**dict(row))
        with self._session_factory() as session:
            try:
                session.add(instance)
                session.commit()
                session.refresh(instance)
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Insert into %s failed", table)
                raise WriteError(f"Failed to write to {table}") from exc
            return _to_row(instance)

    async def update(self, table: str, patch: Mapping[str, Any], *, filters: Mapping[str, Any]) -> int:
        model = _model_for(table)
        if not filters:
            raise ValueError("Refusing to update without filters")
        for name in patch:
            _column(model, name)

        statement = _apply_filters(select(model), model, filters)
        with self._session_factory() as session:
            try:
                instances = list(session.scalars(statement))
                for instance in instances:
                    for name, value in patch.items():
                        setattr(instance, name, value)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Update of %s failed", table)
                raise WriteError(f"Failed to update {table}") from exc
        return len(instances)

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> int:
        model = _model_for(table)
        if not filters:
            raise ValueError("Refusing to delete without filters")

        statement = _apply_filters(select(model), model, filters)
        with self._session_factory() as session:
            try:
                instances = list(session.scalars(statement))
                for instance in instances:
                    session.delete(instance)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.exception("Delete from %s failed", table)
                raise WriteError(f"Failed to delete from {table}") from exc
        return len(instances)


__all__ = ["SqlRemoteStore"]
