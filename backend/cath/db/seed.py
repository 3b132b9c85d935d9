# backend/cath/db/seed.py

"""
Database Seeding Script

Loads reference data (jurisdictions, sub-jurisdictions, regions, courts)
and a development system admin. List types live in code
(cath.list_types.registry) and need no rows.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from cath.db.database import Base, SessionLocal, engine
from cath.db.models import (
    Jurisdiction,
    Location,
    Region,
    SubJurisdiction,
    User,
    UserProvenance,
    UserRole,
)
from cath.list_types.registry import LIST_TYPES

# ============================================================================
# Seed Data
# ============================================================================

JURISDICTIONS = [
    (1, "Civil", "Sifil"),
    (2, "Family", "Teulu"),
    (3, "Crime", "Trosedd"),
    (4, "Tribunal", "Tribiwnlys"),
]

SUB_JURISDICTIONS = [
    (1, 1, "Civil Court", "Llys Sifil"),
    (2, 2, "Family Court", "Llys Teulu"),
    (3, 3, "Crown Court", "Llys y Goron"),
    (4, 3, "Magistrates Court", "Llys Ynadon"),
    (5, 4, "Care Standards Tribunal", "Tribiwnlys Safonau Gofal"),
]

REGIONS = [
    (1, "London", "Llundain"),
    (2, "Midlands", "Canolbarth Lloegr"),
    (3, "Wales", "Cymru"),
]

# location id, name, welsh name, sub-jurisdiction ids, region ids
LOCATIONS = [
    (1, "Oxford Combined Court Centre", "Canolfan Llysoedd Cyfun Rhydychen", [1, 2, 3], [2]),
    (2, "Cardiff Civil and Family Justice Centre", "Canolfan Cyfiawnder Sifil a Theulu Caerdydd", [1, 2], [3]),
    (3, "Westminster Magistrates' Court", "Llys Ynadon Westminster", [4], [1]),
    (9, "Care Standards Tribunal", "Tribiwnlys Safonau Gofal", [5], [1]),
]


def seed_reference_data(db: Session) -> None:
    """Insert the sample reference data"""
    for jurisdiction_id, name, welsh_name in JURISDICTIONS:
        db.add(Jurisdiction(jurisdiction_id=jurisdiction_id, name=name, welsh_name=welsh_name))
    for sub_id, jurisdiction_id, name, welsh_name in SUB_JURISDICTIONS:
        db.add(SubJurisdiction(
            sub_jurisdiction_id=sub_id, jurisdiction_id=jurisdiction_id, name=name, welsh_name=welsh_name
        ))
    for region_id, name, welsh_name in REGIONS:
        db.add(Region(region_id=region_id, name=name, welsh_name=welsh_name))
    db.flush()

    for location_id, name, welsh_name, sub_ids, region_ids in LOCATIONS:
        location = Location(location_id=location_id, name=name, welsh_name=welsh_name)
        location.sub_jurisdictions = db.query(SubJurisdiction).filter(
            SubJurisdiction.sub_jurisdiction_id.in_(sub_ids)
        ).all()
        location.regions = db.query(Region).filter(Region.region_id.in_(region_ids)).all()
        db.add(location)
    db.commit()
    print(f"✅ Created {len(LOCATIONS)} courts and tribunals")


def create_system_admin(db: Session) -> User:
    """Development admin; sign in with a token whose sub is dev-system-admin"""
    user = User(
        email="system.admin@example.com",
        first_name="System",
        surname="Admin",
        user_provenance=UserProvenance.SSO,
        user_provenance_id="dev-system-admin",
        role=UserRole.SYSTEM_ADMIN,
        created_date=datetime.utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"✅ Created system admin: {user.email}")
    return user


# ============================================================================
# Main Seeding Function
# ============================================================================

def seed_database() -> None:
    print("\n" + "=" * 80)
    print("🌱 Seeding CaTH Database")
    print("=" * 80 + "\n")

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(Location).count() > 0:
            print("⚠️  Reference data already present, nothing to do")
            return

        seed_reference_data(db)
        create_system_admin(db)

        print("\n📊 Summary:")
        print(f"   • Jurisdictions: {len(JURISDICTIONS)}")
        print(f"   • Sub-jurisdictions: {len(SUB_JURISDICTIONS)}")
        print(f"   • Regions: {len(REGIONS)}")
        print(f"   • Locations: {len(LOCATIONS)}")
        print(f"   • List types (in code): {len(LIST_TYPES)}")
        print("")
    except Exception as e:
        print(f"\n❌ Seeding failed: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


# ============================================================================
# CLI Entry Point
# ============================================================================

if __name__ == "__main__":
    seed_database()
