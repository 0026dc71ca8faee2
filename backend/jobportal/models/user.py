from sqlalchemy import JSON, Column, Enum, Text

from jobportal.database import Base
from jobportal.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    role = Column(
        Enum(Role, native_enum=False, length=16, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )
    phone = Column(Text)
    address = Column(Text)
    resume = Column(Text)
    skills = Column(JSON, default=list)
    experience = Column(Text)
    education = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
