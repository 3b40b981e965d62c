"""CLI tools for practice administration."""

import click

from practice_api.db.enums import Role
from practice_api.db.models import User
from practice_api.db.session import SessionLocal


@click.group()
def cli():
    """Practice API CLI tools."""
    pass


@cli.command()
@click.option("--email", required=True, help="Staff email address")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option(
    "--role",
    required=True,
    type=click.Choice([r.value for r in Role]),
    help="Staff role",
)
def create_user(email: str, first_name: str, last_name: str, role: str):
    """
    Create a staff user.

    Example:
        practice-api create-user --email "sup@example.com" --first-name Ana --last-name Ruiz --role supervisor
    """
    db = SessionLocal()
    try:
        email = email.lower().strip()
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            click.echo(f"❌ User already exists: {email}")
            return

        user = User(
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
        )
        db.add(user)
        db.commit()

        click.echo(f"✓ Created user: {email}")
        click.echo(f"  ID: {user.id}")
        click.echo(f"  Role: {role}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
def create_patient(first_name: str, last_name: str):
    """Create an active patient record."""
    from practice_api.services import patient_service

    db = SessionLocal()
    try:
        patient = patient_service.create_patient(db, first_name, last_name)
        click.echo(f"✓ Created patient: {patient.full_name}")
        click.echo(f"  ID: {patient.id}")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email to mint a session token for")
def issue_token(email: str):
    """
    Print a session token for a user (API clients, websocket testing).

    Example:
        practice-api issue-token --email "sup@example.com"
    """
    from practice_api.core.security import create_session_token

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user:
            click.echo(f"❌ User not found: {email}")
            return
        if not user.is_active:
            click.echo(f"❌ User is inactive: {email}")
            return

        click.echo(create_session_token(user.id, user.role, user.token_version))
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email to revoke sessions for")
def revoke_sessions(email: str):
    """
    Revoke all sessions for a user by bumping their token_version.

    Example:
        practice-api revoke-sessions --email "user@example.com"
    """
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email.lower()).first()
        if not user:
            click.echo(f"❌ User not found: {email}")
            return

        old_version = user.token_version
        user.token_version += 1
        db.commit()

        click.echo(f"✓ Revoked all sessions for {email}")
        click.echo(f"  Token version: {old_version} → {user.token_version}")

    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
    finally:
        db.close()


@cli.command()
def list_pending():
    """Print pending discharge requests, newest first."""
    from practice_api.services import discharge_request_service

    db = SessionLocal()
    try:
        requests = discharge_request_service.list_pending(db)
        if not requests:
            click.echo("No pending discharge requests")
            return

        for req in requests:
            requester = req.requested_by.display_name if req.requested_by else "unknown"
            click.echo(
                f"{req.id}  {req.requested_at:%Y-%m-%d %H:%M}  "
                f"{req.patient.full_name}  (requested by {requester})"
            )
        click.echo(f"{len(requests)} pending")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
