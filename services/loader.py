from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.employee import Employee
from models.manager import Manager

logger = logging.getLogger(__name__)

SAMPLE_DATA = {
    "Gandalf": [
        ("Frodo Baggins", "ring bearer"),
        ("Bilbo Baggins", "burglar"),
        ("Sam Gamgee", "gardener"),
    ],
    "Saruman": [
        ("Gríma Wormtongue", "advisor"),
    ],
}


async def load_sample_data(db: AsyncSession) -> bool:
    """
    Insert the sample managers and employees into an empty database.
    Returns False (and changes nothing) when managers already exist.
    """
    existing = (await db.execute(select(func.count()).select_from(Manager))).scalar_one()
    if existing:
        logger.info("Sample data skipped: %d managers already stored", existing)
        return False

    for manager_name, staff in SAMPLE_DATA.items():
        manager = Manager(name=manager_name)
        db.add(manager)
        for name, role in staff:
            db.add(Employee(name=name, role=role, manager=manager))

    await db.commit()
    logger.info(
        "Loaded sample data: %d managers, %d employees",
        len(SAMPLE_DATA),
        sum(len(staff) for staff in SAMPLE_DATA.values()),
    )
    return True
