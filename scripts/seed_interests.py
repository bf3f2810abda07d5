"""Seed the interest catalog with a starter set of hobbies.

Interests are appended at the next free catalog position. Re-running is
safe: live interests with the same (name, category) are skipped, and
existing positions are never touched.

Usage:
    docker compose exec backend python -m scripts.seed_interests
"""

from sqlalchemy import func, select

from affinity.models.base import SyncSessionLocal
from affinity.models.interest import Interest

INTERESTS_BY_CATEGORY = {
    "general_hobbies": [
        "Board/tabletop games",
        "Computer programming",
        "Cooking",
        "Creative writing",
        "Dance",
        "Drawing",
        "Knitting",
        "Painting",
        "Playing musical instruments",
        "Pottery",
        "Singing",
        "Woodworking",
    ],
    "outdoor_hobbies": [
        "Birdwatching",
        "Camping",
        "Cycling",
        "Fishing",
        "Gardening",
        "Hiking",
        "Photography",
        "Rock climbing",
        "Running",
        "Sailing",
    ],
    "collection_hobbies": [
        "Coin collecting",
        "Record collecting",
        "Stamp collecting",
        "Vintage clothing",
    ],
    "sports_hobbies": [
        "Basketball",
        "Chess",
        "Martial arts",
        "Soccer",
        "Swimming",
        "Tennis",
        "Yoga",
    ],
    "observation_and_other": [
        "Astronomy",
        "Bird feeding",
        "Museum visiting",
        "Reading",
        "Traveling",
        "Volunteering",
    ],
}


def seed():
    db = SyncSessionLocal()
    created = 0
    skipped = 0

    try:
        max_position = db.execute(select(func.max(Interest.catalog_position))).scalar()
        next_position = 0 if max_position is None else max_position + 1

        for category, names in INTERESTS_BY_CATEGORY.items():
            for name in names:
                existing = db.execute(
                    select(Interest.id).where(
                        Interest.name == name,
                        Interest.category == category,
                        Interest.deleted == False,
                    )
                ).scalar_one_or_none()
                if existing is not None:
                    skipped += 1
                    continue

                db.add(Interest(name=name, category=category, catalog_position=next_position))
                next_position += 1
                created += 1

        db.commit()
        print(f"Interests seed complete: {created} created, {skipped} skipped")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
