"""
Database Setup Script
Creates all tables and seeds demo users, master data and a sample request

Usage:
    python -m purchase_portal.database.setup_database
"""

import sys
from datetime import datetime, timedelta

from purchase_portal.config.database import Base, engine, get_db_context
from purchase_portal.models.approval import ApprovalHistory  # noqa: F401
from purchase_portal.models.master_data import (
    ApprovalMatrix,
    Department,
    Entity,
    EscalationMatrix,
    Inventory,
    Location,
    Role,
    Vendor,
)
from purchase_portal.models.notification import Notification  # noqa: F401
from purchase_portal.models.purchase_request import LineItem, PurchaseRequest, RequestStatus
from purchase_portal.models.user import User, UserRole
from purchase_portal.services.line_item_service import line_item_service
from purchase_portal.services.purchase_request_service import purchase_request_service
from purchase_portal.utils.security import get_password_hash


DEMO_USERS = [
    ("EMP001", "System Administrator", "admin@purchaseportal.local", UserRole.ADMIN, "admin123"),
    ("EMP002", "Department Approver", "approver@purchaseportal.local", UserRole.APPROVER, "approver123"),
    ("EMP003", "Operations Requester", "requester@purchaseportal.local", UserRole.REQUESTER, "requester123"),
]


def create_tables():
    """Create all database tables"""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Database tables created successfully")


def create_initial_users(db):
    print("\nCreating initial users...")

    if db.query(User).first():
        print("✓ Users already exist, skipping...")
        return

    for employee_number, full_name, email, role, password in DEMO_USERS:
        db.add(User(
            employee_number=employee_number,
            full_name=full_name,
            email=email,
            mobile="+91-9876543210",
            department="Operations",
            location="Bangalore",
            hashed_password=get_password_hash(password),
            role=role.value,
            is_active=True,
        ))
    db.flush()
    print(f"✓ Created {len(DEMO_USERS)} users")


def create_master_data(db):
    print("\nCreating master data...")

    if db.query(Department).first():
        print("✓ Master data already exists, skipping...")
        return

    db.add_all([
        Entity(code="HQ", name="Head Office", description="Corporate headquarters"),
        Department(code="OPS", name="Operations", head_of_department="Department Approver", cost_center="CC-100"),
        Department(code="IT", name="Information Technology", cost_center="CC-200"),
        Location(code="BLR", name="Bangalore", city="Bangalore", state="Karnataka", country="India"),
        Role(code="REQ", name="Requester", level=1, permissions=["create_request"]),
        Role(code="APR", name="Approver", level=2, permissions=["approve_request", "reject_request", "return_request"]),
        ApprovalMatrix(department="Operations", location="Bangalore", level=1, role="approver",
                       min_amount=0, max_amount=None),
        ApprovalMatrix(department="Operations", location="Bangalore", level=2, role="admin",
                       min_amount=100000, max_amount=None),
        EscalationMatrix(site="Bangalore Campus", location="Bangalore", escalation_days=3, escalation_level=1,
                         approver_name="System Administrator", approver_email="admin@purchaseportal.local"),
        Inventory(item_code="LAP-001", type="IT Equipment", name="Laptop", quantity=4,
                  unit_of_measure="Nos", location="Bangalore Store"),
        Vendor(vendor_code="V-001", name="Acme Supplies", contact_person="Ravi Kumar",
               email="sales@acme.example", phone="+91-8040000000", category="IT", payment_terms="Net 30"),
    ])
    db.flush()
    print("✓ Master data created")


def create_sample_request(db):
    print("\nCreating sample purchase request...")

    if db.query(PurchaseRequest).first():
        print("✓ Purchase requests already exist, skipping...")
        return

    requester = db.query(User).filter(User.employee_number == "EMP003").first()
    now = datetime.utcnow()

    request = PurchaseRequest(
        requisition_number=purchase_request_service.generate_requisition_number(db, requester.department, now),
        title="Laptops for new joiners",
        request_date=now,
        department=requester.department,
        location=requester.location,
        business_justification_code="NEW_HIRE",
        business_justification_details="Three engineers join next month and need workstations.",
        status=RequestStatus.SUBMITTED.value,
        current_approval_level=1,
        requester_id=requester.id,
    )
    db.add(request)
    db.flush()

    db.add_all([
        LineItem(purchase_request_id=request.id, item_name="Laptop", required_quantity=2, unit_of_measure="Nos",
                 required_by_date=now + timedelta(days=30), delivery_location="Bangalore Office",
                 unit_cost=500.0, stock_available=4, stock_location="Bangalore Store"),
        LineItem(purchase_request_id=request.id, item_name="Docking Station", required_quantity=3,
                 unit_of_measure="Nos", required_by_date=now + timedelta(days=30),
                 delivery_location="Bangalore Office", unit_cost=100.0),
    ])
    db.flush()
    line_item_service.apply_rollup(db, request)

    print(f"✓ Created {request.requisition_number} (total {request.total_estimated_cost:.2f})")


def print_setup_summary():
    print("\n" + "=" * 70)
    print("DATABASE SETUP COMPLETE")
    print("=" * 70)
    print("\nTEST USER CREDENTIALS (employee number / password):")
    for employee_number, full_name, _, role, password in DEMO_USERS:
        print(f"  • {employee_number} / {password}  ({full_name}, {role.value})")
    print("\nNEXT STEPS:")
    print("  1. Start the application: uvicorn purchase_portal.main:app --reload")
    print("  2. Access API Documentation: http://localhost:8000/api/docs")
    print("\n" + "=" * 70 + "\n")


def main():
    """Main setup function"""
    print("=" * 70)
    print("PURCHASE REQUISITION PORTAL - DATABASE SETUP")
    print("=" * 70)

    try:
        create_tables()
        with get_db_context() as db:
            create_initial_users(db)
            create_master_data(db)
            create_sample_request(db)
        print_setup_summary()

    except Exception as e:
        print(f"\n✗ Database setup failed: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
