"""CLI tools for HRMS administration."""

import click
from sqlalchemy import or_

from app.core.security import hash_password
from app.db.enums import Priority, ProjectSource, UserRole
from app.db.models import Announcement, Project, ProjectAssignment, User
from app.db.session import SessionLocal
from app.services import auth_service, mfa_service


DEMO_EMPLOYEES = [
    ("Ayesha Khan", "ayesha@example.com", "EMP001", "Engineering", "Backend Developer"),
    ("Bilal Ahmed", "bilal@example.com", "EMP002", "Engineering", "Frontend Developer"),
    ("Sara Malik", "sara@example.com", "EMP003", "Design", "Product Designer"),
]
DEMO_PASSWORD = "password123"


def _find_user(db, identifier: str) -> User | None:
    """Look a user up by email or employee ID."""
    return db.query(User).filter(
        or_(User.email == identifier.lower(), User.employee_id == identifier)
    ).first()


@click.group()
def cli():
    """HRMS CLI tools."""
    pass


@cli.command()
@click.option("--name", required=True, help="Admin display name")
@click.option("--email", required=True, help="Admin email address")
@click.option("--employee-id", required=True, help="Login ID")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Initial password")
def create_admin(name: str, email: str, employee_id: str, password: str):
    """
    Bootstrap an administrator account.

    The admin enrolls TOTP two-factor on first login.

    Example:
        python -m app.cli create-admin --name "HR" --email hr@acme.com --employee-id ADM001
    """
    db = SessionLocal()
    try:
        existing = db.query(User).filter(
            or_(User.email == email.lower(), User.employee_id == employee_id)
        ).first()
        if existing:
            click.echo("❌ A user with that email or employee ID already exists")
            return

        user = User(
            name=name,
            email=email.lower(),
            employee_id=employee_id,
            password_hash=hash_password(password),
            role=UserRole.ADMIN.value,
        )
        db.add(user)
        db.commit()

        click.echo(f"✓ Created admin: {name}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"→ Log in with employee ID {employee_id} to enroll two-factor")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command(name="reset-2fa")
@click.argument("identifier")
def reset_2fa(identifier: str):
    """
    Clear a user's TOTP enrollment (email or employee ID).

    Example:
        python -m app.cli reset-2fa ADM001
    """
    db = SessionLocal()
    try:
        user = _find_user(db, identifier)
        if not user:
            click.echo(f"❌ User not found: {identifier}")
            return

        mfa_service.reset_two_factor(db, user)
        click.echo(f"✓ Two-factor reset for {user.employee_id}")
        click.echo("→ A new secret is provisioned on next login")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.argument("identifier")
def revoke_sessions(identifier: str):
    """
    Revoke all sessions for a user by bumping their token_version.

    Example:
        python -m app.cli revoke-sessions user@example.com
    """
    db = SessionLocal()
    try:
        user = _find_user(db, identifier)
        if not user:
            click.echo(f"❌ User not found: {identifier}")
            return

        old_version = user.token_version
        auth_service.revoke_sessions(db, user)

        click.echo(f"✓ Revoked all sessions for {user.employee_id}")
        click.echo(f"  Token version: {old_version} → {user.token_version}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
def seed_demo():
    """
    Create demo employees, a shared project and a welcome announcement.

    Existing employee IDs are skipped, so the command can be re-run.
    """
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.role == UserRole.ADMIN.value).first()

        employees = []
        for name, email, employee_id, department, position in DEMO_EMPLOYEES:
            user = _find_user(db, employee_id)
            if user:
                click.echo(f"  skip {employee_id} (exists)")
            else:
                user = User(
                    name=name,
                    email=email,
                    employee_id=employee_id,
                    password_hash=hash_password(DEMO_PASSWORD),
                    department=department,
                    position=position,
                )
                db.add(user)
                click.echo(f"✓ Created employee {employee_id}")
            employees.append(user)
        db.flush()

        project = db.query(Project).filter(Project.name == "Employee Portal").first()
        if not project:
            project = Project(
                name="Employee Portal",
                description="Internal HR portal rollout",
                priority=Priority.HIGH.value,
                source=ProjectSource.TEAM_LEAD.value,
                created_by=admin.id if admin else None,
            )
            db.add(project)
            db.flush()
            for user in employees:
                db.add(ProjectAssignment(project_id=project.id, user_id=user.id))
            click.echo("✓ Created project: Employee Portal")

        if admin and not db.query(Announcement).first():
            db.add(Announcement(
                title="Welcome",
                content="Welcome to the HR portal.",
                priority=Priority.MEDIUM.value,
                created_by=admin.id,
            ))
            click.echo("✓ Created welcome announcement")

        db.commit()
        click.echo(f"→ Demo employees log in with password {DEMO_PASSWORD!r}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
