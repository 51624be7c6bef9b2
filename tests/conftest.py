"""Root-level pytest fixtures for all tests.

Provides:
- Boundary fakes (see tests.helpers.fakes) and the query configuration
- An in-memory SQLite database seeded with a small challenge catalog
"""

import os
from collections.abc import Generator
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from direct_api.config import QueryConfig
from direct_api.db.models import (
    Base,
    BillingAccount,
    Client,
    CompTechnology,
    PhaseType,
    Prize,
    Project,
    ProjectCategory,
    ProjectInfo,
    ProjectInfoType,
    ProjectPhase,
    ProjectPlatform,
    ProjectPlatformType,
    ProjectStatus,
    TcDirectProject,
    TechnologyType,
    User,
    UserPermissionGrant,
)
from tests.helpers.fakes import DEFAULT_CATALOG, FakeChallenges, FakeLookups, FakeUsers


def pytest_configure(config):
    """Keep the application engine off the working directory."""
    os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")


# ============================================================================
# Boundary fakes
# ============================================================================


@pytest.fixture
def query_config() -> QueryConfig:
    return QueryConfig()


@pytest.fixture
def fake_users() -> FakeUsers:
    return FakeUsers({100: "alice", 200: "bob"})


@pytest.fixture
def fake_lookups() -> FakeLookups:
    return FakeLookups(DEFAULT_CATALOG)


@pytest.fixture
def fake_challenges() -> FakeChallenges:
    return FakeChallenges()


# ============================================================================
# Database fixtures
# ============================================================================


ALICE = 100
BOB = 200


def seed_reference_data(session: Session) -> None:
    """Populate a small challenge catalog.

    Alice (100) can access direct projects 500 and 600, Bob (200) only 600.
    Challenges:
        1001  Active     Code          project 500  by alice  Java, AWS  prizes 250
        1002  Draft      First2Finish  project 600  by bob    .NET, Mobile
        1003  Completed  Code          project 500  by alice  Java, Python  prizes 500
        1004  Active     Code          project 700  by alice  (no grant)
    """
    session.add_all(
        [
            ProjectStatus(project_status_id=1, name="Active"),
            ProjectStatus(project_status_id=2, name="Draft"),
            ProjectStatus(project_status_id=7, name="Completed"),
            ProjectStatus(project_status_id=10, name="Cancelled - Failed Review"),
            ProjectCategory(project_category_id=39, name="Code"),
            ProjectCategory(project_category_id=38, name="First2Finish"),
            TechnologyType(technology_type_id=1, technology_name="Java"),
            TechnologyType(technology_type_id=2, technology_name=".NET"),
            TechnologyType(technology_type_id=3, technology_name="Python"),
            ProjectPlatformType(project_platform_id=1, name="AWS"),
            ProjectPlatformType(project_platform_id=2, name="Mobile"),
            User(user_id=ALICE, handle="alice"),
            User(user_id=BOB, handle="bob"),
            TcDirectProject(project_id=500, name="Apollo Rebuild"),
            TcDirectProject(project_id=600, name="Gemini Portal"),
            TcDirectProject(project_id=700, name="Hidden Project"),
            Client(client_id=10, name="Acme"),
        ]
    )
    session.flush()
    session.add_all(
        [
            BillingAccount(billing_id=20, name="Acme Billing", client_id=10),
            UserPermissionGrant(user_permission_grant_id=1, user_id=ALICE, resource_id=500),
            UserPermissionGrant(user_permission_grant_id=2, user_id=ALICE, resource_id=600),
            UserPermissionGrant(user_permission_grant_id=3, user_id=BOB, resource_id=600),
            Project(project_id=1001, project_status_id=1, project_category_id=39,
                    tc_direct_project_id=500, create_user=ALICE),
            Project(project_id=1002, project_status_id=2, project_category_id=38,
                    tc_direct_project_id=600, create_user=BOB),
            Project(project_id=1003, project_status_id=7, project_category_id=39,
                    tc_direct_project_id=500, create_user=ALICE),
            Project(project_id=1004, project_status_id=1, project_category_id=39,
                    tc_direct_project_id=700, create_user=ALICE),
            CompTechnology(comp_vers_id=9001, technology_type_id=1),
            CompTechnology(comp_vers_id=9002, technology_type_id=2),
            CompTechnology(comp_vers_id=9003, technology_type_id=1),
            CompTechnology(comp_vers_id=9003, technology_type_id=3),
        ]
    )
    session.flush()

    info = [
        (1001, ProjectInfoType.project_name, "Payments API"),
        (1001, ProjectInfoType.component_version, "9001"),
        (1001, ProjectInfoType.billing_project, "20"),
        (1001, ProjectInfoType.dr_points, "250.5"),
        (1002, ProjectInfoType.project_name, "Mobile Checkout"),
        (1002, ProjectInfoType.component_version, "9002"),
        (1003, ProjectInfoType.project_name, "Legacy Migration"),
        (1003, ProjectInfoType.component_version, "9003"),
        (1004, ProjectInfoType.project_name, "Secret Work"),
        (1004, ProjectInfoType.component_version, "9001"),
    ]
    session.add_all(
        ProjectInfo(project_id=pid, project_info_type_id=kind.value, value=value)
        for pid, kind, value in info
    )

    session.add_all(
        [
            # 1001: starts 2020-01-05 10:00, ends 2020-01-15 18:00
            ProjectPhase(project_phase_id=1, project_id=1001,
                         phase_type_id=PhaseType.registration.value,
                         scheduled_start_time=datetime(2020, 1, 4, 9, 0),
                         actual_start_time=datetime(2020, 1, 5, 10, 0),
                         scheduled_end_time=datetime(2020, 1, 8, 9, 0)),
            ProjectPhase(project_phase_id=2, project_id=1001,
                         phase_type_id=PhaseType.review.value,
                         scheduled_start_time=datetime(2020, 1, 10, 9, 0),
                         scheduled_end_time=datetime(2020, 1, 15, 18, 0)),
            # 1002: starts 2020-02-01 08:00, ends 2020-02-20 12:00
            ProjectPhase(project_phase_id=3, project_id=1002,
                         phase_type_id=PhaseType.registration.value,
                         scheduled_start_time=datetime(2020, 2, 1, 8, 0),
                         scheduled_end_time=datetime(2020, 2, 5, 8, 0)),
            ProjectPhase(project_phase_id=4, project_id=1002,
                         phase_type_id=PhaseType.submission.value,
                         scheduled_start_time=datetime(2020, 2, 5, 8, 0),
                         scheduled_end_time=datetime(2020, 2, 20, 12, 0)),
            # 1003: starts 2019-06-01, ends 2019-06-30 17:00 (actual)
            ProjectPhase(project_phase_id=5, project_id=1003,
                         phase_type_id=PhaseType.registration.value,
                         scheduled_start_time=datetime(2019, 6, 1, 0, 0),
                         actual_start_time=datetime(2019, 6, 1, 0, 0),
                         scheduled_end_time=datetime(2019, 6, 10, 0, 0),
                         actual_end_time=datetime(2019, 6, 10, 0, 0)),
            ProjectPhase(project_phase_id=6, project_id=1003,
                         phase_type_id=PhaseType.review.value,
                         scheduled_start_time=datetime(2019, 6, 20, 0, 0),
                         scheduled_end_time=datetime(2019, 6, 29, 0, 0),
                         actual_end_time=datetime(2019, 6, 30, 17, 0)),
            ProjectPhase(project_phase_id=7, project_id=1004,
                         phase_type_id=PhaseType.registration.value,
                         scheduled_start_time=datetime(2020, 3, 1, 0, 0),
                         scheduled_end_time=datetime(2020, 3, 10, 0, 0)),
            ProjectPlatform(project_id=1001, project_platform_id=1),
            ProjectPlatform(project_id=1002, project_platform_id=2),
            # 1001: 100 + 50 challenge prizes, 4 x 25 checkpoint prizes
            Prize(prize_id=1, project_id=1001, place=1, prize_amount=100.0,
                  prize_type_id=15, number_of_submissions=1),
            Prize(prize_id=2, project_id=1001, place=2, prize_amount=50.0,
                  prize_type_id=15, number_of_submissions=1),
            Prize(prize_id=3, project_id=1001, place=1, prize_amount=25.0,
                  prize_type_id=14, number_of_submissions=4),
            # 1003: one challenge prize and a prize type that is not counted
            Prize(prize_id=4, project_id=1003, place=1, prize_amount=500.0,
                  prize_type_id=15, number_of_submissions=1),
            Prize(prize_id=5, project_id=1003, place=1, prize_amount=100.0,
                  prize_type_id=13, number_of_submissions=1),
        ]
    )
    session.commit()


@pytest.fixture
def test_db() -> Generator[Session, None, None]:
    """Create an in-memory SQLite database for testing.

    Creates all tables, yields a session, and cleans up after test.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seeded_db(test_db: Session) -> Session:
    """The test database populated by seed_reference_data()."""
    seed_reference_data(test_db)
    return test_db
