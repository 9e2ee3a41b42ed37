from .base import SQLAlchemyConnector

class PostgresConnector(SQLAlchemyConnector):
    """
    PostgreSQL over asyncpg.
    Every transaction on the session defaults to READ ONLY.
    """
    driver_name = "postgresql+asyncpg"
    read_only_connect_args = {
        "server_settings": {"default_transaction_read_only": "on"},
    }
