from dataclasses import asdict, dataclass
from typing import Optional

ROLE_ADMIN = "admin"
ROLE_CLIENT = "cliente"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str = ROLE_CLIENT
    phone: Optional[str] = None

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @classmethod
    def from_api(cls, data):
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=data.get("role") or ROLE_CLIENT,
            phone=data.get("phone"),
        )

    def to_session(self):
        return asdict(self)

    @classmethod
    def from_session(cls, data):
        return cls(**data)

    def __repr__(self):
        return f'<User {self.email}>'
