"""Shared test helpers: an in-memory SQLite schema and small record builders."""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.models import Account, Base, Case, Project, ProjectMember, User
from app.schemas.auth import AuthSession, SessionUser


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with every table; one shared connection for all sessions."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(db: Session, email: str, role: str = "member", name: str | None = None) -> User:
    user = User(email=email, name=name or email.split("@")[0], role=role, is_active=True)
    db.add(user)
    db.commit()
    return user


def add_account(db: Session, name: str, owner: User | None = None) -> Account:
    account = Account(name=name, owner_id=owner.id if owner else None)
    db.add(account)
    db.commit()
    return account


def add_project(
    db: Session,
    key: str,
    owner: User | None = None,
    account: Account | None = None,
    members: tuple[tuple[User, str], ...] = (),
) -> Project:
    project = Project(
        key=key,
        name=f"Project {key}",
        owner_id=owner.id if owner else None,
        account_id=account.id if account else None,
    )
    db.add(project)
    db.flush()
    for user, role in members:
        db.add(ProjectMember(project_id=project.id, user_id=user.id, role=role))
    db.commit()
    return project


def add_case(
    db: Session,
    title: str,
    account: Account | None = None,
    owner: User | None = None,
    project: Project | None = None,
    stage: str = "QUALIFIED",
) -> Case:
    case = Case(
        title=title,
        stage=stage,
        account_id=account.id if account else None,
        owner_id=owner.id if owner else None,
        project_id=project.id if project else None,
    )
    db.add(case)
    db.commit()
    return case


def session_for(user: User) -> AuthSession:
    return AuthSession(
        user=SessionUser(id=user.id, email=user.email, name=user.name or "", role=user.role)
    )


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(sub=user.id, role=user.role, email=user.email, name=user.name)
    return {"Authorization": f"Bearer {token}"}
