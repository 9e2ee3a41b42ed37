from .base import SQLAlchemyConnector

class MySQLConnector(SQLAlchemyConnector):
    """
    MySQL over aiomysql.
    The session is switched to READ ONLY transactions right after connecting.
    """
    driver_name = "mysql+aiomysql"
    read_only_connect_args = {
        "init_command": "SET SESSION TRANSACTION READ ONLY",
    }
