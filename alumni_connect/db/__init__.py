"""
Database module - MongoDB connection helpers.
"""
from alumni_connect.db.mongodb import (
    COLLECTIONS,
    create_mongo_client,
    get_db,
    get_database,
    init_indexes,
    ping,
)

__all__ = [
    "COLLECTIONS",
    "create_mongo_client",
    "get_db",
    "get_database",
    "init_indexes",
    "ping",
]
