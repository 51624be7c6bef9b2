"""SQLAlchemy ORM models for the challenge reference schema.

The Direct API only reads these tables; the models exist so the schema can
be created for development databases and tests. Uses SQLAlchemy 2.0 style
with Mapped and mapped_column. Timestamps are naive datetimes.
"""

from datetime import datetime
from enum import IntEnum
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class ProjectInfoType(IntEnum):
    """project_info rows the challenge query reads."""

    component_version = 1
    project_name = 6
    dr_points = 30
    billing_project = 32


class PhaseType(IntEnum):
    """Phase types referenced by the challenge query."""

    registration = 1
    submission = 2
    review = 4


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class ProjectStatus(Base):
    """Lookup of challenge statuses (Active, Draft, Completed, ...)."""

    __tablename__ = "project_status_lu"

    project_status_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64))


class ProjectCategory(Base):
    """Lookup of challenge types (Code, First2Finish, ...)."""

    __tablename__ = "project_category_lu"

    project_category_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64))


class TcDirectProject(Base):
    """A direct project grouping challenges."""

    __tablename__ = "tc_direct_project"

    project_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))


class User(Base):
    """A platform user."""

    __tablename__ = "user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    handle: Mapped[str] = mapped_column(String(50), unique=True)


class UserPermissionGrant(Base):
    """Grants a user access to a direct project."""

    __tablename__ = "user_permission_grant"

    user_permission_grant_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.user_id"), index=True)
    resource_id: Mapped[int] = mapped_column(
        ForeignKey("tc_direct_project.project_id"), index=True
    )
    permission_type_id: Mapped[int] = mapped_column(Integer, default=1)


class Client(Base):
    """A paying client."""

    __tablename__ = "client"

    client_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))


class BillingAccount(Base):
    """A client billing account challenges are charged to."""

    __tablename__ = "billing_account"

    billing_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    client_id: Mapped[int] = mapped_column(ForeignKey("client.client_id"))


class Project(Base):
    """A challenge."""

    __tablename__ = "project"

    project_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_status_id: Mapped[int] = mapped_column(
        ForeignKey("project_status_lu.project_status_id")
    )
    project_category_id: Mapped[int] = mapped_column(
        ForeignKey("project_category_lu.project_category_id")
    )
    tc_direct_project_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tc_direct_project.project_id"), index=True
    )
    create_user: Mapped[int] = mapped_column(ForeignKey("user.user_id"))


class ProjectInfo(Base):
    """Typed key/value attributes of a challenge."""

    __tablename__ = "project_info"

    project_id: Mapped[int] = mapped_column(ForeignKey("project.project_id"), primary_key=True)
    project_info_type_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    value: Mapped[str] = mapped_column(String(255))


class ProjectPhase(Base):
    """A scheduled phase of a challenge."""

    __tablename__ = "project_phase"

    project_phase_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.project_id"), index=True)
    phase_type_id: Mapped[int] = mapped_column(Integer)
    scheduled_start_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    actual_start_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    scheduled_end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)
    actual_end_time: Mapped[Optional[datetime]] = mapped_column(DateTime)


class TechnologyType(Base):
    """Lookup of technologies (Java, .NET, ...)."""

    __tablename__ = "technology_types"

    technology_type_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    technology_name: Mapped[str] = mapped_column(String(100))


class CompTechnology(Base):
    """Technologies used by a component version."""

    __tablename__ = "comp_technology"

    comp_vers_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    technology_type_id: Mapped[int] = mapped_column(
        ForeignKey("technology_types.technology_type_id"), primary_key=True
    )


class ProjectPlatformType(Base):
    """Lookup of platforms (AWS, Mobile, ...)."""

    __tablename__ = "project_platform_lu"

    project_platform_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))


class ProjectPlatform(Base):
    """Platforms a challenge targets."""

    __tablename__ = "project_platform"

    project_id: Mapped[int] = mapped_column(ForeignKey("project.project_id"), primary_key=True)
    project_platform_id: Mapped[int] = mapped_column(
        ForeignKey("project_platform_lu.project_platform_id"), primary_key=True
    )


class Prize(Base):
    """A prize offered by a challenge."""

    __tablename__ = "prize"

    prize_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("project.project_id"), index=True)
    place: Mapped[int] = mapped_column(Integer)
    prize_amount: Mapped[float] = mapped_column(Float)
    prize_type_id: Mapped[int] = mapped_column(Integer)
    number_of_submissions: Mapped[int] = mapped_column(Integer, default=1)
