"""Catalog configuration loaded from environment variables."""
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Catalog configuration loaded from environment variables.

    Attributes:
        host: Bind address for the HTTP server.
        port: Port number for the HTTP server.
        debug: Enable debug logging and API documentation.
        json_logs: Emit JSON log lines instead of console output.
        cors_origins_raw: Raw comma-separated CORS origins string.
        key: API key required by the admin endpoints, disabled when empty.
        database_path: SQLite database file holding the book table.
        database_timeout: Seconds SQLite waits for a locked database.
        opensearch_url: Base URL of the OpenSearch cluster.
        opensearch_username: Basic auth user, unused when empty.
        opensearch_password: Basic auth password.
        opensearch_verify_certs: Verify TLS certificates of the cluster.
        opensearch_timeout: Per-request timeout for search engine calls.
        index_alias: Logical alias the physical book indices are bound to.
        reindex_batch_size: Rows fetched per keyset page during a reindex.
        search_limit: Maximum number of hits requested per search.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 4567
    debug: bool = False
    json_logs: bool = True
    cors_origins_raw: str = ""
    key: str = ""

    database_path: str = "books.db"
    database_timeout: float = 5.0

    opensearch_url: str = "http://localhost:9200"
    opensearch_username: str = ""
    opensearch_password: str = ""
    opensearch_verify_certs: bool = True
    opensearch_timeout: float = 10.0

    index_alias: str = "books"
    reindex_batch_size: int = 1000
    search_limit: int = 10

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
