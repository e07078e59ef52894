"""
Seed one user per role, wired into the hierarchy
"""
from agency_portal.config.database import SessionLocal, engine
from agency_portal.core.auth.service import AuthService
from agency_portal.shared.database.models import (
    AgentGroup, AttendanceTimeframe, Base, User
)

TEST_USERS = [
    # work_id, email, password, full_name, role, creator work_id
    ("ADM001", "admin@example.com", "admin123", "System Administrator", "Admin", None),
    ("MGR001", "manager@example.com", "manager123", "Maria Manager", "Manager", "ADM001"),
    ("SLF001", "sales@example.com", "sales123", "Samuel Sales", "SalesStaff", "MGR001"),
    ("AGT001", "agent@example.com", "agent123", "Alice Agent", "Agent", "SLF001"),
    ("AGT002", "teamleader@example.com", "agent123", "Tom Leader", "TeamLeader", "SLF001"),
]

def create_test_users():
    """Create the demo hierarchy with an 08:00-09:30 check-in window"""

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"✅ {existing_users} users already exist in the database")
            return

        by_work_id = {}
        for work_id, email, password, full_name, role, creator in TEST_USERS:
            user = User(
                work_id=work_id,
                email=email,
                password_hash=AuthService.get_password_hash(password),
                full_name=full_name,
                role=role,
                created_by_id=by_work_id[creator].id if creator else None,
                is_active=True
            )
            db.add(user)
            db.flush()
            by_work_id[work_id] = user
            print(f"✅ User created: {work_id} {email} / {password} ({role})")

        sales_staff = by_work_id["SLF001"]
        team_leader = by_work_id["AGT002"]

        db.add(AttendanceTimeframe(sales_staff_id=sales_staff.id, start_time="08:00", end_time="09:30"))
        db.add(AgentGroup(
            sales_staff_id=sales_staff.id,
            team_leader_id=team_leader.id,
            name=f"{team_leader.full_name}'s Group"
        ))

        db.commit()
        print(f"\n🎉 {len(TEST_USERS)} test users created")
        print("\n📋 Login with email + work ID + password:")
        for work_id, email, password, _, role, _ in TEST_USERS:
            print(f"   👤 {role.upper()}: {email} / {work_id} / {password}")

    except Exception as e:
        db.rollback()
        print(f"❌ Error creating users: {e}")
        raise

    finally:
        db.close()

if __name__ == "__main__":
    create_test_users()
