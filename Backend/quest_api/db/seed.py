"""
Reference data: the road from Bag End to Mount Doom and the achievement catalogue.

seed_reference_data is idempotent: milestones are matched on order_index and
achievements on name, so re-running it only inserts what is missing.
"""
import logging
from sqlalchemy.orm import Session

from quest_api.db.models.achievement import Achievement
from quest_api.db.models.milestone import Milestone

logger = logging.getLogger(__name__)

# (order_index, name, distance_from_start, description)
MILESTONES = [
    (1, "Bag End", 0, "The journey begins at Bilbo's hole under the Hill in Hobbiton."),
    (2, "Bucklebury Ferry", 50, "A hurried crossing of the Brandywine with Black Riders close behind."),
    (3, "Bree", 135, "The Prancing Pony, and a ranger in the corner."),
    (4, "Weathertop", 207, "The ruined watchtower of Amon Sûl."),
    (5, "Ford of Bruinen", 438, "The river rises against the Nine."),
    (6, "Rivendell", 458, "The Last Homely House east of the Sea. The Fellowship is formed."),
    (7, "Caradhras", 600, "The Redhorn Pass turns the company back with snow."),
    (8, "West-gate of Moria", 687, "Speak, friend, and enter."),
    (9, "Bridge of Khazad-dûm", 728, "The long dark of Moria ends at the narrow bridge."),
    (10, "Lothlórien", 920, "The Golden Wood, and the Mirror of Galadriel."),
    (11, "The Argonath", 1280, "The Pillars of the Kings on the Anduin."),
    (12, "Amon Hen", 1309, "The Fellowship breaks by the falls of Rauros."),
    (13, "Emyn Muil", 1360, "A maze of sharp rock, and a guide who lurks."),
    (14, "Dead Marshes", 1420, "Do not follow the lights."),
    (15, "The Black Gate", 1490, "The Morannon is shut; another way must be found."),
    (16, "Henneth Annûn", 1555, "The Window on the West, refuge of the rangers of Ithilien."),
    (17, "Minas Morgul", 1640, "The Dead City, and the stair beside it."),
    (18, "Shelob's Lair", 1660, "Torech Ungol, in the dark."),
    (19, "Tower of Cirith Ungol", 1665, "Sam finds the way in."),
    (20, "Mount Doom", 1779, "Orodruin, where the Ring was made and must be unmade."),
]

# (name, requirement_type, requirement_value, description)
ACHIEVEMENTS = [
    ("First Steps", "steps", 1, "Log your first steps."),
    ("Ten Thousand", "steps", 10_000, "Walk 10,000 steps in total."),
    ("Shire Walker", "steps", 100_000, "Walk 100,000 steps in total."),
    ("Ranger of the North", "steps", 1_000_000, "Walk a million steps in total."),
    ("There and Back Again", "steps", 3_558_000, "Walk the full 1,779 miles."),
    ("Three Days on the Road", "streak", 3, "Log steps three days in a row."),
    ("A Week Afoot", "streak", 7, "Log steps seven days in a row."),
    ("A Month of Marching", "streak", 30, "Log steps thirty days in a row."),
    ("At the Prancing Pony", "milestone", 3, "Reach Bree."),
    ("Council of Elrond", "milestone", 6, "Reach Rivendell."),
    ("Out of the Dark", "milestone", 10, "Reach Lothlórien."),
    ("The Ring Is Unmade", "milestone", 20, "Reach Mount Doom."),
    ("Second Breakfast", "special", None, "Awarded by the Fellowship for services to snacking."),
]


def seed_reference_data(db: Session) -> tuple[int, int]:
    """Insert missing milestones and achievements. Returns (milestones_added, achievements_added)."""
    existing_orders = {order for (order,) in db.query(Milestone.order_index).all()}
    new_milestones = [
        Milestone(order_index=order, name=name, distance_from_start=distance, description=description)
        for order, name, distance, description in MILESTONES
        if order not in existing_orders
    ]

    existing_names = {name for (name,) in db.query(Achievement.name).all()}
    new_achievements = [
        Achievement(name=name, requirement_type=kind, requirement_value=value, description=description)
        for name, kind, value, description in ACHIEVEMENTS
        if name not in existing_names
    ]

    db.add_all(new_milestones + new_achievements)
    db.commit()

    if new_milestones or new_achievements:
        logger.info("Seeded %d milestones and %d achievements", len(new_milestones), len(new_achievements))
    return len(new_milestones), len(new_achievements)
