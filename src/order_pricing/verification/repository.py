"""MongoDB repository for reading stored theater orders."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import MongoClient

from ..utils.config import Config
from ..utils.logging import get_logger

logger = get_logger(__name__)


class OrderRepository:
    """Read-only access to the ``theaterorders`` collection.

    Each document holds one theater's orders in its ``orderList`` array.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        db_name: Optional[str] = None,
        collection: Optional[str] = None,
        connection_url_env_key: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> None:
        config = config or Config(".env")

        # Environment-specific key wins over the generic DB_CONNECTION_URL
        if connection_url_env_key:
            self._url = os.getenv(connection_url_env_key) or url or config.get("mongo_url")
        else:
            self._url = url or config.get("mongo_url")

        self._db = db_name or config.get("mongo_db")
        self._collection = collection or config.get("mongo_collection")
        if not self._url:
            raise ValueError("DB_CONNECTION_URL is required")
        self._client: Optional[MongoClient] = None

    def __enter__(self) -> "OrderRepository":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def connect(self) -> None:
        if self._client is None:
            logger.debug("Connecting to MongoDB database %s", self._db)
            self._client = MongoClient(self._url, serverSelectionTimeoutMS=5000)

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def get_order_by_number(
        self, order_number: str, theater_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Return the stored order with ``order_number`` or None."""
        if self._client is None:
            self.connect()
        coll = self._client[self._db][self._collection]

        query: Dict[str, Any] = {"orderList.orderNumber": order_number}
        if theater_id:
            query["theater"] = ObjectId(theater_id) if ObjectId.is_valid(theater_id) else theater_id

        document = coll.find_one(query, {"orderList.$": 1, "theater": 1})
        if not document or not document.get("orderList"):
            return None
        return document["orderList"][0]
