"""
Placement Service - placement records and read-time statistics.

Stats are never stored: every call folds over the current placements
collection and the current number of student accounts.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from alumni_connect.db.mongodb import COLLECTIONS
from alumni_connect.services.mongo_service import (
    UserService,
    serialize_doc,
    serialize_docs,
    user_summary,
)

logger = logging.getLogger(__name__)

STUDENT_FIELDS = ("username", "fullName", "role", "department", "graduationYear")


def compute_placement_stats(placements: Iterable[dict], student_count: int) -> dict:
    """
    Aggregate placement records.

    Args:
        placements: records with at least "company" and "package"
        student_count: number of users with role=student

    Returns:
        {
            "totalPlacements": 3,
            "placementRate": 30.0,         # % of students placed, 0 without students
            "averagePackage": 10.67,       # 0 without placements
            "highestPackage": 14,          # 0 without placements
            "companyStats": [{"company", "count", "minPackage", "maxPackage"}, ...]
        }

    companyStats groups by the exact company string and is ordered by count,
    highest first; companies with equal counts keep first-seen order.
    """
    placements = list(placements)
    total = len(placements)
    packages = [p["package"] for p in placements]

    by_company: Dict[str, List[float]] = {}
    for placement in placements:
        by_company.setdefault(placement["company"], []).append(placement["package"])

    company_stats = [
        {
            "company": company,
            "count": len(company_packages),
            "minPackage": min(company_packages),
            "maxPackage": max(company_packages),
        }
        for company, company_packages in by_company.items()
    ]
    company_stats.sort(key=lambda c: c["count"], reverse=True)

    return {
        "totalPlacements": total,
        "placementRate": total * 100 / student_count if student_count > 0 else 0,
        "averagePackage": sum(packages) / total if total else 0,
        "highestPackage": max(packages) if packages else 0,
        "companyStats": company_stats,
    }


class PlacementService:
    """Placement records (package in lakhs) joined with the placed student."""

    def __init__(self, db: Database):
        self.collection: Collection = db[COLLECTIONS["placements"]]
        self.users = UserService(db)

    def create(self, data: dict) -> dict:
        # studentId must reference an existing user
        self.users.require(data["studentId"])

        doc = {**data, "createdAt": datetime.utcnow()}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Placement recorded: %s at %s (%s LPA)",
                    data["studentId"], data["company"], data["package"])
        return serialize_doc(doc)

    def list(self) -> List[dict]:
        rows = serialize_docs(self.collection.find().sort("year", DESCENDING))
        students = self.users.get_many(row["studentId"] for row in rows)
        for row in rows:
            row["student"] = user_summary(students.get(row["studentId"]), STUDENT_FIELDS)
        return rows

    def stats(self) -> dict:
        placements = self.collection.find({}, {"company": 1, "package": 1})
        return compute_placement_stats(placements, self.users.count_by_role("student"))
