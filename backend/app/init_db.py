"""Database initialization script with seed data."""

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from app.config import settings
from app.database import Base, create_db_engine, create_session_factory
from app.models import User
from app.services.password_service import PasswordService

DEMO_NAME = "Demo User"
DEMO_EMAIL = "demo@snapfeed.local"
DEMO_PASSWORD = "demo1234"


def create_tables(engine: Engine):
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def seed_data(db: Session):
    """Seed a verified demo user so the API can be tried without email."""
    print("\nSeeding database with a demo user...")
    user = User(
        name=DEMO_NAME,
        email=DEMO_EMAIL,
        password_hash=PasswordService.hash_password(DEMO_PASSWORD),
        verified=True,
        active=True,
    )
    db.add(user)
    db.commit()
    print(f"Created {DEMO_EMAIL} / {DEMO_PASSWORD}")


def init_db():
    """Initialize database with tables and seed data."""
    print("Initializing database...")
    engine = create_db_engine(settings.database_url)

    create_tables(engine)

    db = create_session_factory(engine)()
    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"\nDatabase already has {existing_users} users. Skipping seed data.")
            return

        seed_data(db)
        print("\nDatabase initialization complete!")

    except Exception as e:
        print(f"\nError during database initialization: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    init_db()
