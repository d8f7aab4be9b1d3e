#!/usr/bin/env python3
"""
Database Seeding

Usage:
    python -m app.seed                          # Sample plumbers + current draft payroll
    SEED_SAMPLE_DATA=true python -m app.seed    # Also sample jobs in that payroll
    SEED_ADMIN_PASSWORD=... python -m app.seed  # Also an "admin" login

Behavior:
    - Plumbers are only created when the plumbers table is empty
    - The draft payroll closes on the coming Friday
    - Sample jobs are priced by the commission calculator, never hard-coded
    - Safe to run multiple times (idempotent)

Seeds whichever storage DATABASE_URL selects; without it the data only
lives for the duration of this process.
"""

import os
from datetime import date
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

from app.auth import hash_password
from app.services.jobs import record_job
from app.storage import Storage, create_storage


# =============================================================================
# SAMPLE DATA
# =============================================================================

PLUMBERS = [
    {
        "name": "John Smith",
        "email": "john.smith@example.com",
        "phone": "555-123-4567",
        "commission_rate": Decimal("30"),
        "is_active": True,
        "start_date": date(2022, 1, 1),
    },
    {
        "name": "Michael Johnson",
        "email": "michael.j@example.com",
        "phone": "555-234-5678",
        "commission_rate": Decimal("30"),
        "is_active": True,
        "start_date": date(2022, 2, 15),
    },
    {
        "name": "David Wilson",
        "email": "david.w@example.com",
        "phone": "555-345-6789",
        "commission_rate": Decimal("30"),
        "is_active": True,
        "start_date": date(2022, 3, 10),
    },
    {
        "name": "Robert Brown",
        "email": "robert.b@example.com",
        "phone": "555-456-7890",
        "commission_rate": Decimal("25"),
        "is_active": False,
        "start_date": date(2022, 4, 5),
    },
]

# (plumber name, customer, revenue, parts cost, outside labor)
JOBS = [
    ("John Smith", "Johnson Residence", "850.00", "250.00", "100.00"),
    ("John Smith", "Smith Office Building", "1200.00", "350.00", "0.00"),
    ("Michael Johnson", "Adams Home", "750.00", "200.00", "50.00"),
    ("David Wilson", "Wilson Apartment", "550.00", "150.00", "0.00"),
]


# =============================================================================
# SEEDING FUNCTIONS
# =============================================================================


def seed_plumbers(storage: Storage) -> list:
    """Create the sample plumbers unless some already exist."""
    existing = storage.get_plumbers()
    if existing:
        print(f"  [SKIP] {len(existing)} plumber(s) already exist")
        return existing

    created = []
    for data in PLUMBERS:
        print(f"  [CREATE] Plumber: {data['name']} ({data['commission_rate']}%)")
        created.append(storage.create_plumber(data))
    return created


def seed_jobs(storage: Storage, payroll) -> int:
    """Add the sample jobs to an empty draft payroll. Returns count created."""
    if storage.get_jobs_by_payroll(payroll.id):
        print(f"  [SKIP] Payroll {payroll.id} already has jobs")
        return 0

    by_name = {p.name: p for p in storage.get_plumbers()}
    created = 0

    for plumber_name, customer, revenue, parts_cost, outside_labor in JOBS:
        plumber = by_name.get(plumber_name)
        if plumber is None:
            print(f"  [SKIP] Job {customer}: no plumber named {plumber_name}")
            continue
        job = record_job(
            storage,
            {
                "date": payroll.week_ending_date,
                "customer_name": customer,
                "revenue": Decimal(revenue),
                "parts_cost": Decimal(parts_cost),
                "outside_labor": Decimal(outside_labor),
                "plumber_id": plumber.id,
                "payroll_id": payroll.id,
            },
        )
        print(f"  [CREATE] Job: {customer} -> commission {job.commission_amount}")
        created += 1
    return created


def seed_admin(storage: Storage, password: str) -> bool:
    if storage.get_user_by_username("admin"):
        print("  [SKIP] admin user exists")
        return False
    storage.create_user({"username": "admin", "password_hash": hash_password(password)})
    print("  [CREATE] admin user")
    return True


def main():
    """Main seeding entry point."""
    print("=" * 60)
    print("DATABASE SEEDING")
    print("=" * 60)

    seed_sample = os.getenv("SEED_SAMPLE_DATA", "false").lower() == "true"
    admin_password = os.getenv("SEED_ADMIN_PASSWORD")

    storage = create_storage()

    print("Phase 1: Plumbers")
    seed_plumbers(storage)

    print("\nPhase 2: Current Payroll")
    payroll = storage.get_current_payroll()
    print(f"  [OK] Payroll {payroll.id}, week ending {payroll.week_ending_date}")

    print("\nPhase 3: Sample Jobs")
    if seed_sample:
        seed_jobs(storage, payroll)
    else:
        print("  [SKIPPED - set SEED_SAMPLE_DATA=true to enable]")

    if admin_password:
        print("\nPhase 4: Admin User")
        seed_admin(storage, admin_password)

    print("\n" + "=" * 60)
    print("SEEDING COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
