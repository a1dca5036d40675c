"""
SQLite store implementation for content, summaries and the concept graph.

One aiosqlite connection backs all three store interfaces. Every write is
committed on its own; the pipeline is deliberately not transactional
across steps.
"""

import json
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from conceptweave.core.stores.base import ConceptGraphStore, ContentStore, SummaryStore
from conceptweave.models.content import ContentItem, ContentKind, EnrichmentStatus
from conceptweave.models.graph import ConceptNode, Connection, NodePosition, NodeType
from conceptweave.models.summary import SummaryRecord
from conceptweave.utils.exceptions import PersistenceError
from conceptweave.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteStore(ContentStore, SummaryStore, ConceptGraphStore):
    """
    SQLite-based storage for the ingestion pipeline.

    Features:
    - Cascading delete of Summary Records with their Content Item
    - UNIQUE(user_id, label_key) on graph nodes for insert-if-absent
    - JSON columns for tags, concepts, embeddings and positions
    """

    def __init__(self, db_path: str = "data/conceptweave.db"):
        """
        Initialize SQLite store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            self.connection.row_factory = aiosqlite.Row
            await self.connection.execute("PRAGMA foreign_keys = ON")
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS contents (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                title TEXT NOT NULL,
                body TEXT NOT NULL,
                kind TEXT NOT NULL,
                tags TEXT DEFAULT '[]',
                source_url TEXT,
                embedding TEXT,
                enrichment_status TEXT NOT NULL,
                failed_step TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """
        )

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS summaries (
                id TEXT PRIMARY KEY,
                content_id TEXT NOT NULL UNIQUE,
                summary TEXT NOT NULL,
                key_concepts TEXT DEFAULT '[]',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY (content_id) REFERENCES contents(id) ON DELETE CASCADE
            )
        """
        )

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS graph_nodes (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                label TEXT NOT NULL,
                label_key TEXT NOT NULL,
                type TEXT NOT NULL,
                color TEXT NOT NULL,
                position TEXT NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE (user_id, label_key)
            )
        """
        )

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS connections (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                source_concept TEXT NOT NULL,
                target_concept TEXT NOT NULL,
                strength REAL NOT NULL,
                reason TEXT,
                created_at TEXT NOT NULL
            )
        """
        )

        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_contents_user ON contents(user_id, created_at)"
        )
        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_connections_user ON connections(user_id)"
        )

        await self.connection.commit()

    async def _execute(self, query: str, params: Iterable[Any] = (), commit: bool = False):
        """Run a statement, translating driver errors into PersistenceError."""
        await self.connect()
        try:
            cursor = await self.connection.execute(query, tuple(params))
            if commit:
                await self.connection.commit()
            return cursor
        except aiosqlite.Error as e:
            logger.error(f"SQLite error: {e}", extra={"query": query.split()[0], "error": str(e)})
            raise PersistenceError(f"Store operation failed: {e}") from e

    async def _fetchone(self, query: str, params: Iterable[Any] = ()) -> aiosqlite.Row | None:
        cursor = await self._execute(query, params)
        return await cursor.fetchone()

    async def _fetchall(self, query: str, params: Iterable[Any] = ()) -> list[aiosqlite.Row]:
        cursor = await self._execute(query, params)
        return list(await cursor.fetchall())

    async def _count(self, query: str, params: Iterable[Any] = ()) -> int:
        row = await self._fetchone(query, params)
        return row[0] if row else 0

    # ═══════════════════════════════════════════════════════════
    # CONTENT OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def add_content(self, content: ContentItem) -> None:
        """Insert a new Content Item."""
        await self._execute(
            """
            INSERT INTO contents (
                id, user_id, title, body, kind, tags, source_url, embedding,
                enrichment_status, failed_step, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                content.id,
                content.user_id,
                content.title,
                content.body,
                content.kind.value,
                json.dumps(content.tags),
                content.source_url,
                json.dumps(content.embedding) if content.embedding is not None else None,
                content.enrichment_status.value,
                content.failed_step,
                content.created_at.isoformat(),
                content.updated_at.isoformat(),
            ),
            commit=True,
        )

    async def get_content(self, content_id: str, user_id: str) -> ContentItem | None:
        row = await self._fetchone(
            "SELECT * FROM contents WHERE id = ? AND user_id = ?", (content_id, user_id)
        )
        return self._row_to_content(row) if row else None

    async def update_content(self, content: ContentItem) -> bool:
        cursor = await self._execute(
            """
            UPDATE contents
            SET title = ?, body = ?, tags = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                content.title,
                content.body,
                json.dumps(content.tags),
                content.updated_at.isoformat(),
                content.id,
                content.user_id,
            ),
            commit=True,
        )
        return cursor.rowcount > 0

    async def update_embedding(self, content_id: str, embedding: list[float]) -> None:
        await self._execute(
            "UPDATE contents SET embedding = ? WHERE id = ?",
            (json.dumps(embedding), content_id),
            commit=True,
        )

    async def update_enrichment_status(
        self, content_id: str, status: EnrichmentStatus, failed_step: str | None = None
    ) -> None:
        await self._execute(
            "UPDATE contents SET enrichment_status = ?, failed_step = ? WHERE id = ?",
            (status.value, failed_step, content_id),
            commit=True,
        )

    async def delete_content(self, content_id: str, user_id: str) -> bool:
        cursor = await self._execute(
            "DELETE FROM contents WHERE id = ? AND user_id = ?", (content_id, user_id), commit=True
        )
        return cursor.rowcount > 0

    async def list_contents(self, user_id: str, limit: int = 100) -> list[ContentItem]:
        rows = await self._fetchall(
            """
            SELECT * FROM contents WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        return [self._row_to_content(row) for row in rows]

    async def count_contents(self, user_id: str) -> int:
        return await self._count("SELECT COUNT(*) FROM contents WHERE user_id = ?", (user_id,))

    # ═══════════════════════════════════════════════════════════
    # SUMMARY OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def add_summary(self, summary: SummaryRecord) -> None:
        await self._execute(
            """
            INSERT INTO summaries (id, content_id, summary, key_concepts, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                summary.id,
                summary.content_id,
                summary.summary,
                json.dumps(summary.key_concepts),
                summary.created_at.isoformat(),
                summary.updated_at.isoformat(),
            ),
            commit=True,
        )

    async def upsert_summary(self, summary: SummaryRecord) -> SummaryRecord:
        updated = await self.update_summary(
            summary.content_id, summary.summary, summary.key_concepts
        )
        if updated is not None:
            return updated

        await self.add_summary(summary)
        return summary

    async def update_summary(
        self, content_id: str, summary: str, key_concepts: list[str]
    ) -> SummaryRecord | None:
        cursor = await self._execute(
            "UPDATE summaries SET summary = ?, key_concepts = ?, updated_at = ? "
            "WHERE content_id = ?",
            (summary, json.dumps(key_concepts), datetime.now().isoformat(), content_id),
            commit=True,
        )
        if cursor.rowcount == 0:
            return None
        return await self.get_summary(content_id)

    async def get_summary(self, content_id: str) -> SummaryRecord | None:
        row = await self._fetchone("SELECT * FROM summaries WHERE content_id = ?", (content_id,))
        return self._row_to_summary(row) if row else None

    async def list_concept_lists(
        self, user_id: str, exclude_content_id: str | None = None
    ) -> list[list[str]]:
        query = """
            SELECT s.key_concepts FROM summaries s
            JOIN contents c ON c.id = s.content_id
            WHERE c.user_id = ?
        """
        params: list[Any] = [user_id]

        if exclude_content_id is not None:
            query += " AND s.content_id != ?"
            params.append(exclude_content_id)

        query += " ORDER BY s.created_at, s.rowid"

        rows = await self._fetchall(query, params)
        return [json.loads(row["key_concepts"]) if row["key_concepts"] else [] for row in rows]

    async def count_summaries(self, user_id: str) -> int:
        return await self._count(
            """
            SELECT COUNT(*) FROM summaries s
            JOIN contents c ON c.id = s.content_id
            WHERE c.user_id = ?
            """,
            (user_id,),
        )

    # ═══════════════════════════════════════════════════════════
    # CONCEPT GRAPH OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def get_node(self, user_id: str, label_key: str) -> ConceptNode | None:
        row = await self._fetchone(
            "SELECT * FROM graph_nodes WHERE user_id = ? AND label_key = ?", (user_id, label_key)
        )
        return self._row_to_node(row) if row else None

    async def insert_node_if_absent(self, node: ConceptNode) -> tuple[ConceptNode, bool]:
        cursor = await self._execute(
            """
            INSERT INTO graph_nodes
                (id, user_id, label, label_key, type, color, position, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, label_key) DO NOTHING
            """,
            (
                node.id,
                node.user_id,
                node.label,
                node.label_key,
                node.type.value,
                node.color,
                node.position.model_dump_json(),
                node.created_at.isoformat(),
            ),
            commit=True,
        )
        if cursor.rowcount > 0:
            return node, True

        existing = await self.get_node(node.user_id, node.label_key)
        if existing is None:
            raise PersistenceError(f"Node insert for '{node.label}' neither created nor found")
        return existing, False

    async def list_nodes(self, user_id: str) -> list[ConceptNode]:
        rows = await self._fetchall(
            "SELECT * FROM graph_nodes WHERE user_id = ? ORDER BY created_at, rowid", (user_id,)
        )
        return [self._row_to_node(row) for row in rows]

    async def count_nodes(self, user_id: str, label_key: str | None = None) -> int:
        if label_key is None:
            return await self._count(
                "SELECT COUNT(*) FROM graph_nodes WHERE user_id = ?", (user_id,)
            )
        return await self._count(
            "SELECT COUNT(*) FROM graph_nodes WHERE user_id = ? AND label_key = ?",
            (user_id, label_key),
        )

    async def add_connection(self, connection: Connection) -> None:
        await self._execute(
            """
            INSERT INTO connections (
                id, user_id, source_concept, target_concept, strength, reason, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                connection.id,
                connection.user_id,
                connection.source_concept,
                connection.target_concept,
                connection.strength,
                connection.reason,
                connection.created_at.isoformat(),
            ),
            commit=True,
        )

    async def list_connections(self, user_id: str) -> list[Connection]:
        rows = await self._fetchall(
            "SELECT * FROM connections WHERE user_id = ? ORDER BY created_at, rowid", (user_id,)
        )
        return [self._row_to_connection(row) for row in rows]

    async def delete_connection(self, connection_id: str, user_id: str) -> bool:
        cursor = await self._execute(
            "DELETE FROM connections WHERE id = ? AND user_id = ?",
            (connection_id, user_id),
            commit=True,
        )
        return cursor.rowcount > 0

    async def count_connections(self, user_id: str) -> int:
        return await self._count("SELECT COUNT(*) FROM connections WHERE user_id = ?", (user_id,))

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    def _row_to_content(self, row: aiosqlite.Row) -> ContentItem:
        return ContentItem(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            body=row["body"],
            kind=ContentKind(row["kind"]),
            tags=json.loads(row["tags"]) if row["tags"] else [],
            source_url=row["source_url"],
            embedding=json.loads(row["embedding"]) if row["embedding"] else None,
            enrichment_status=EnrichmentStatus(row["enrichment_status"]),
            failed_step=row["failed_step"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_summary(self, row: aiosqlite.Row) -> SummaryRecord:
        return SummaryRecord(
            id=row["id"],
            content_id=row["content_id"],
            summary=row["summary"],
            key_concepts=json.loads(row["key_concepts"]) if row["key_concepts"] else [],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_node(self, row: aiosqlite.Row) -> ConceptNode:
        return ConceptNode(
            id=row["id"],
            user_id=row["user_id"],
            label=row["label"],
            label_key=row["label_key"],
            type=NodeType(row["type"]),
            color=row["color"],
            position=NodePosition.model_validate_json(row["position"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_connection(self, row: aiosqlite.Row) -> Connection:
        return Connection(
            id=row["id"],
            user_id=row["user_id"],
            source_concept=row["source_concept"],
            target_concept=row["target_concept"],
            strength=row["strength"],
            reason=row["reason"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
