import datetime as dt

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def naive_utc(value: dt.datetime) -> dt.datetime:
    """TIMESTAMP WITHOUT TIME ZONE columns hold naive UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(dt.UTC)
    return value.replace(tzinfo=None)


class RefreshToken(SQLModel, table=True):
    """Issued refresh tokens, keyed by their ``jti`` so they can be rotated or revoked."""

    __tablename__ = "refresh_tokens"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    jti: str = Field(unique=True, index=True)
    expires_at: dt.datetime = Field(sa_column=Column(DateTime, nullable=False, index=True))
    revoked: bool = False

    def model_post_init(self, __context: object) -> None:
        if self.expires_at is not None:
            self.expires_at = naive_utc(self.expires_at)
