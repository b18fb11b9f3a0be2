from .db import SessionLocal
from .models import CATEGORY, ELIGIBILITY, PERSONA, DirectoryRecord, Taxonomy
from .records import PAGE, SERVICE

TAXONOMIES = [
    # (id, name, parent_id)
    ("cat-health", "Health", None),
    ("cat-mental-health", "Mental health", "cat-health"),
    ("cat-food", "Food", None),
    ("persona-carers", "Carers", None),
    ("elig-adults", "Adults 18+", None),
    ("elig-families", "Families", None),
]


def run(session_factory=SessionLocal) -> int:
    """Insert demo taxonomies and records into an empty directory.

    Returns the number of records inserted (0 when data already exists).
    """
    with session_factory() as db:
        if db.query(DirectoryRecord).count() > 0:
            return 0

        for node_id, name, parent_id in TAXONOMIES:
            db.add(Taxonomy(id=node_id, name=name, parent_id=parent_id))
        db.flush()

        counselling = DirectoryRecord(
            id="svc-counselling",
            kind=SERVICE,
            title="Talking therapies",
            body="Free counselling sessions for adults and carers.",
            wait_time_days=14,
            is_free=True,
            lat=51.5074,
            lon=-0.1278,
        )
        counselling.tag("cat-mental-health", CATEGORY)
        counselling.tag("persona-carers", PERSONA)
        counselling.tag("elig-adults", ELIGIBILITY)

        food_bank = DirectoryRecord(
            id="svc-food-bank",
            kind=SERVICE,
            title="Community food bank",
            body="Emergency food parcels, no referral needed.",
            wait_time_days=0,
            is_free=True,
            lat=51.5014,
            lon=-0.1419,
        )
        food_bank.tag("cat-food", CATEGORY)
        food_bank.tag("elig-families", ELIGIBILITY)

        guide = DirectoryRecord(
            id="page-food-guide",
            kind=PAGE,
            title="Food support guide",
            body="Where to find food banks and community meals.",
        )

        db.add_all([counselling, food_bank, guide])
        db.commit()
        return 3


if __name__ == "__main__":
    run()
