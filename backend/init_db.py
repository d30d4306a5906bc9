"""
Database initialization script
Run this to create tables and, with --seed, add a few demo customers
"""
import sys
from datetime import date, timedelta
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from renewal_desk.core.database import SessionLocal, init_database
from renewal_desk.services.normalizer import normalize_phone
from renewal_desk.services.store import PolicyStore


DEMO_ROWS = [
    # name, phone, policy number, type, days until expiry
    ("Asha Verma", "9876500001", "DEMO-HEALTH-001", "Health", 30),
    ("Ravi Kumar", "9876500002", "DEMO-MOTOR-002", "Motor", 15),
    ("Meera Nair", "9876500003", "DEMO-LIFE-003", "Life", 7),
    ("Imran Shaikh", "9876500004", "DEMO-HOME-004", "Home", -3),
]


def init_db():
    """Initialize database with tables"""
    print("Creating database tables...")
    init_database()
    print("✓ Tables created successfully")


def seed_data():
    """Seed demo customers whose policies line up with the reminder offsets"""
    db = SessionLocal()

    try:
        print("\nSeeding demo data...")
        store = PolicyStore(db)
        today = date.today()
        for name, phone, policy_number, policy_type, days in DEMO_ROWS:
            customer = store.get_or_create_customer(name, normalize_phone(phone))
            store.upsert_policy(
                customer_id=customer.id,
                policy_number=policy_number,
                policy_type=policy_type,
                expiry_date=(today + timedelta(days=days)).isoformat(),
            )
            print(f"✓ {name} ({policy_type}) expires in {days} days")

    except Exception as e:
        print(f"✗ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("=" * 60)
    print("Policy Renewal Desk - Database Initialization")
    print("=" * 60)

    init_db()
    if "--seed" in sys.argv:
        seed_data()

    print("\n" + "=" * 60)
    print("Initialization complete!")
    print("=" * 60)
    print("\nYou can now run:")
    print("  uvicorn renewal_desk.main:app --reload")
    print("  - API Docs: http://localhost:8000/docs")
    print("=" * 60)
