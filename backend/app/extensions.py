import logging
from contextlib import contextmanager

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from app.errors import TransportFailure

logger = logging.getLogger(__name__)

_client = None
_db = None


def init_mongo(app, client=None):
    """Connect to MongoDB. Tests hand in a ready client (e.g. mongomock)."""
    global _client, _db
    _client = client if client is not None else MongoClient(app.config["MONGO_URI"])

    db_name = app.config.get("MONGO_DB_NAME")
    if db_name:
        _db = _client[db_name]
    else:
        # get_default_database() extracts DB name from URI (e.g., /expense_tracker)
        _db = _client.get_default_database()

    try:
        ensure_indexes(_db)
    except PyMongoError as e:
        logger.warning("[MongoDB] Could not create indexes: %s", e)
    logger.info("[MongoDB] Connected to database: %s", _db.name)


def ensure_indexes(database):
    database.users.create_index("email", unique=True)
    database.expenses.create_index(
        [("owner_id", ASCENDING), ("date", DESCENDING), ("created_at", DESCENDING)]
    )
    database.token_blocklist.create_index("jti", unique=True)


@contextmanager
def mongo_errors(action):
    """Re-raise driver errors as TransportFailure."""
    try:
        yield
    except PyMongoError as e:
        logger.error("[MongoDB] %s failed: %s", action, e)
        raise TransportFailure(f"Could not {action}, please try again") from e


def get_db():
    """Get the database instance. Must be called after init_mongo."""
    return _db


# Proxy that always resolves to the current db, so modules can import it early
class _DBProxy:
    def __getattr__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return getattr(_db, name)

    def __getitem__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return _db[name]

    def __bool__(self):
        return _db is not None


db = _DBProxy()
