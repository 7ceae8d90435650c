from enum import Enum

from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    client = "client"
    admin = "admin"


class UserBase(SQLModel):
    username: str = Field(unique=True, index=True)
    document: str | None = Field(default=None, unique=True, index=True)
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    role: UserRole = Field(default=UserRole.client)
    provider_id: str | None = None  # set for admins: the barber they manage
    hashed_password: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.username


class UserCreate(UserBase):
    password: str
    role: UserRole = UserRole.client
    provider_id: str | None = None


class UserPublic(SQLModel):
    id: int
    username: str
    document: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    role: UserRole
    provider_id: str | None = None
