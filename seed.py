"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 4 sample users (1 admin, 1 realtor, 2 buyers)
  - 8 sample houses around Austin, TX (one not yet geocoded)
  - 2 sample tours whose stops are entered in a deliberately poor order
"""

import asyncio

from sqlalchemy import text
from geoalchemy2.functions import ST_MakePoint

from tourplanner.infrastructure.database import async_session_factory, engine
from tourplanner.infrastructure.models import (
    HouseModel,
    TourModel,
    TourStopModel,
    UserModel,
)
from tourplanner.domain.enums import TourStatus, UserRole


USERS = [
    {"name": "Alex Admin", "email": "admin@example.com", "role": UserRole.ADMIN},
    {"name": "Riley Realtor", "email": "riley@example.com", "role": UserRole.REALTOR},
    {"name": "Jordan Buyer", "email": "jordan@example.com", "role": UserRole.BUYER},
    {"name": "Sam Buyer", "email": "sam@example.com", "role": UserRole.BUYER},
]

HOUSES = [
    {"address": "1100 Congress Ave", "city": "Austin", "state": "TX", "lat": 30.2747, "lng": -97.7404},
    {"address": "2400 E Cesar Chavez St", "city": "Austin", "state": "TX", "lat": 30.2555, "lng": -97.7180},
    {"address": "4500 Duval St", "city": "Austin", "state": "TX", "lat": 30.3130, "lng": -97.7260},
    {"address": "1801 S Lamar Blvd", "city": "Austin", "state": "TX", "lat": 30.2480, "lng": -97.7680},
    {"address": "6200 Burnet Rd", "city": "Austin", "state": "TX", "lat": 30.3320, "lng": -97.7400},
    {"address": "900 W 29th St", "city": "Austin", "state": "TX", "lat": 30.2960, "lng": -97.7470},
    {"address": "3300 Bee Caves Rd", "city": "Austin", "state": "TX", "lat": 30.2720, "lng": -97.7980},
    # Not geocoded yet -- excluded from optimization
    {"address": "12 Unmapped Ln", "city": "Austin", "state": "TX", "lat": None, "lng": None},
]

# House positions (into HOUSES) per tour, in the order the realtor entered them
TOURS = [
    {
        "name": "Saturday central Austin",
        "buyer": 2,
        "status": TourStatus.PLANNED,
        "stops": [4, 1, 6, 2, 3, 0, 7],
    },
    {
        "name": "Westside follow-up",
        "buyer": 3,
        "status": TourStatus.COMPLETED,
        "stops": [6, 0, 3],
    },
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        user_models = []
        for u in USERS:
            m = UserModel(name=u["name"], email=u["email"], role=u["role"])
            session.add(m)
            user_models.append(m)
        await session.flush()
        print(f"  Created {len(user_models)} users")

        # ── Houses ────────────────────────────────────────────────────
        house_models = []
        for h in HOUSES:
            located = h["lat"] is not None
            m = HouseModel(
                address=h["address"],
                city=h["city"],
                state=h["state"],
                latitude=h["lat"],
                longitude=h["lng"],
                location=ST_MakePoint(h["lng"], h["lat"]) if located else None,
            )
            session.add(m)
            house_models.append(m)
        await session.flush()
        print(f"  Created {len(house_models)} houses")

        # ── Tours ─────────────────────────────────────────────────────
        realtor = user_models[1]
        for t in TOURS:
            tour = TourModel(
                name=t["name"],
                realtor_id=realtor.id,
                buyer_id=user_models[t["buyer"]].id,
                status=t["status"],
            )
            session.add(tour)
            await session.flush()
            for index, house_pos in enumerate(t["stops"]):
                session.add(
                    TourStopModel(
                        tour_id=tour.id,
                        house_id=house_models[house_pos].id,
                        order_index=index,
                    )
                )
        await session.flush()
        print(f"  Created {len(TOURS)} tours")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
