import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Generator, List, Optional

from neo4j import GraphDatabase, Session
from config import settings

logger = logging.getLogger(__name__)


class Neo4jConnection:
    """Manages the Neo4j driver that backs the resource map document store."""

    def __init__(self):
        """Initialize Neo4j connection with settings from config."""
        self.uri = settings.neo4j_uri
        self.user = settings.neo4j_user
        self.password = settings.neo4j_password

        if not self.password:
            raise ValueError("NEO4J_PASSWORD is required in settings")

        self.driver = GraphDatabase.driver(
            self.uri,
            auth=(self.user, self.password),
            max_connection_pool_size=50,
            connection_acquisition_timeout=30,
            max_transaction_retry_time=30
        )

    def close(self):
        """Close the driver connection"""
        if self.driver:
            self.driver.close()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session with automatic cleanup"""
        session = self.driver.session()
        try:
            yield session
        finally:
            session.close()

    def verify_connectivity(self) -> bool:
        """Verify database connectivity.

        Returns:
            bool: True if connected, False otherwise
        """
        try:
            with self.get_session() as session:
                result = session.run("RETURN 1 as test")
                return result.single()["test"] == 1
        except Exception as e:
            logger.error(f"Database connectivity check failed: {e}")
            return False


# Singleton instance
db = Neo4jConnection()


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string, the format stored on every node."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    """Opaque identifier assigned to new records by the store."""
    return uuid.uuid4().hex


class BaseRepository:
    """Base repository with common Neo4j operations.

    Each record type lives under its own node label. Records are stored as
    flat property maps, so nested values must be lists of primitives.
    """

    def __init__(self):
        self.db = db

    def execute_query(self, query: str, parameters: dict = None) -> list:
        """Execute a query and return results.

        Args:
            query: Cypher query string
            parameters: Optional query parameters

        Returns:
            list: Query results as list of dictionaries
        """
        with self.db.get_session() as session:
            result = session.run(query, parameters or {})
            return [record.data() for record in result]

    def create_node(self, label: str, data: Dict) -> Optional[Dict]:
        """Create a node with a fresh id and timestamps.

        Args:
            label: Node label for the record type
            data: Property map; None values are dropped

        Returns:
            dict: The stored properties, or None if nothing was written
        """
        now = utc_now()
        props = {k: v for k, v in data.items() if v is not None}
        props["id"] = new_id()
        props["createdAt"] = now
        props["updatedAt"] = now

        query = f"""
        CREATE (n:{label})
        SET n = $props
        RETURN n
        """
        result = self.execute_query(query, {"props": props})
        return result[0]['n'] if result else None

    def get_node(self, label: str, node_id: str) -> Optional[Dict]:
        """Get a single node by id"""
        query = f"""
        MATCH (n:{label} {{id: $id}})
        RETURN n
        """
        result = self.execute_query(query, {"id": node_id})
        return result[0]['n'] if result else None

    def update_node(self, label: str, node_id: str, updates: Dict) -> Optional[Dict]:
        """Overwrite the given properties in place and bump updatedAt"""
        params = {k: v for k, v in updates.items() if v is not None}
        params["updatedAt"] = utc_now()

        query = f"""
        MATCH (n:{label} {{id: $id}})
        SET n += $props
        RETURN n
        """
        result = self.execute_query(query, {"id": node_id, "props": params})
        return result[0]['n'] if result else None

    def delete_node(self, label: str, node_id: str) -> bool:
        """Delete a node and its relationships"""
        query = f"""
        MATCH (n:{label} {{id: $id}})
        DETACH DELETE n
        RETURN count(n) as deleted
        """
        result = self.execute_query(query, {"id": node_id})
        return result[0]['deleted'] > 0 if result else False

    def find_nodes(self, label: str, where: Dict = None, order_by: str = "createdAt",
                   descending: bool = True, skip: int = 0, limit: Optional[int] = None) -> List[Dict]:
        """Find nodes whose properties equal every value in `where`"""
        where = where or {}
        clauses = [f"n.{key} = ${key}" for key in where]
        where_clause = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if descending else "ASC"
        limit_clause = "LIMIT $limit" if limit else ""

        query = f"""
        MATCH (n:{label})
        {where_clause}
        RETURN n
        ORDER BY n.{order_by} {direction}
        SKIP $skip
        {limit_clause}
        """
        params = {**where, "skip": skip}
        if limit:
            params["limit"] = limit
        result = self.execute_query(query, params)
        return [record['n'] for record in result]
