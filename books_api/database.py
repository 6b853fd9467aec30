"""
SQLite storage handle for the books table.
Handles connection, schema creation, and CRUD statements.
"""

from typing import Dict, List, Optional

import aiosqlite
import structlog

from books_api.models import Book, BookInput

logger = structlog.get_logger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    author TEXT,
    description TEXT,
    year INTEGER NOT NULL
)
"""

# SQLite INTEGER is a signed 64-bit value
MIN_ROW_ID = -(2 ** 63)
MAX_ROW_ID = 2 ** 63 - 1

# sqlite3 raises OverflowError for Python ints outside the INTEGER range
ENGINE_ERRORS = (aiosqlite.Error, OverflowError)


def is_storable_id(book_id: int) -> bool:
    return MIN_ROW_ID <= book_id <= MAX_ROW_ID


class StorageError(Exception):
    """Raised when the database engine rejects or fails a statement."""


class BookStore:
    """
    Async storage handle for book operations.
    Owns a single aiosqlite connection for the lifetime of the application.
    """

    def __init__(self, database_path: str):
        """
        Initialize the storage handle.

        Args:
            database_path: Path of the SQLite database file
        """
        self.database_path = database_path
        self.connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Open (or create) the database file."""
        try:
            self.connection = await aiosqlite.connect(self.database_path)
            self.connection.row_factory = aiosqlite.Row
            logger.info("Connected to database", path=self.database_path)
        except (aiosqlite.Error, OSError) as e:
            logger.error("Failed to connect to database", path=self.database_path, error=str(e))
            raise StorageError(str(e)) from e

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None
            logger.info("Disconnected from database")

    def _require_connection(self) -> aiosqlite.Connection:
        if self.connection is None:
            raise StorageError("Database connection is not open")
        return self.connection

    async def ensure_schema(self) -> None:
        """Create the books table if it does not exist."""
        connection = self._require_connection()
        try:
            await connection.execute(SCHEMA)
            await connection.commit()
        except aiosqlite.Error as e:
            logger.error("Failed to create books table", error=str(e))
            raise StorageError(str(e)) from e

    async def list_all(self) -> List[Book]:
        """
        Get every book in storage order.

        Returns:
            List of books, empty when the table is empty
        """
        connection = self._require_connection()
        try:
            async with connection.execute("SELECT * FROM books") as cursor:
                rows = await cursor.fetchall()
            return [Book.from_row(row) for row in rows]
        except aiosqlite.Error as e:
            logger.error("Failed to list books", error=str(e))
            raise StorageError(str(e)) from e

    async def get_by_id(self, book_id: int) -> Optional[Book]:
        """
        Get a single book by ID.

        Args:
            book_id: Book identifier

        Returns:
            Book if found, None otherwise
        """
        connection = self._require_connection()
        if not is_storable_id(book_id):
            return None
        try:
            async with connection.execute(
                "SELECT * FROM books WHERE id = ?", (book_id,)
            ) as cursor:
                row = await cursor.fetchone()
        except ENGINE_ERRORS as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise StorageError(str(e)) from e

        if row is None:
            return None
        return Book.from_row(row)

    async def insert(self, book: BookInput) -> int:
        """
        Insert a new book.

        Args:
            book: Field values; absent fields are stored as NULL

        Returns:
            The generated book ID
        """
        connection = self._require_connection()
        try:
            async with connection.execute(
                "INSERT INTO books (title, author, description, year) VALUES (?, ?, ?, ?)",
                book.as_params(),
            ) as cursor:
                book_id = cursor.lastrowid
            await connection.commit()
        except ENGINE_ERRORS as e:
            logger.error("Failed to insert book", error=str(e))
            raise StorageError(str(e)) from e

        logger.debug("Book inserted", book_id=book_id)
        return book_id

    async def update(self, book_id: int, book: BookInput) -> int:
        """
        Overwrite all mutable fields of a book.

        Args:
            book_id: Book identifier
            book: New field values; absent fields are stored as NULL

        Returns:
            Number of rows affected (0 when no such book exists)
        """
        connection = self._require_connection()
        if not is_storable_id(book_id):
            return 0
        try:
            async with connection.execute(
                """
                UPDATE books
                SET title = ?, author = ?, description = ?, year = ?
                WHERE id = ?
                """,
                (*book.as_params(), book_id),
            ) as cursor:
                changes = cursor.rowcount
            await connection.commit()
        except ENGINE_ERRORS as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise StorageError(str(e)) from e

        return changes

    async def delete_by_id(self, book_id: int) -> int:
        """
        Delete a book.

        Returns:
            Number of rows affected (0 when no such book exists)
        """
        connection = self._require_connection()
        if not is_storable_id(book_id):
            return 0
        try:
            async with connection.execute(
                "DELETE FROM books WHERE id = ?", (book_id,)
            ) as cursor:
                changes = cursor.rowcount
            await connection.commit()
        except ENGINE_ERRORS as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise StorageError(str(e)) from e

        return changes

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            connection = self._require_connection()
            async with connection.execute("SELECT COUNT(*) FROM books") as cursor:
                (books_count,) = await cursor.fetchone()
            return {
                "status": "healthy",
                "books_count": books_count,
            }
        except (aiosqlite.Error, StorageError) as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }
