class MetalizeException(Exception):
    """Base Exception Class"""
    pass

class ConnectionError(MetalizeException):
    """Connection Failure"""
    pass

class ConfigurationError(MetalizeException):
    """Configuration Error"""
    pass

class CatalogError(MetalizeException):
    """Catalog value the dialect adapter cannot map (unknown action code, etc.)"""
    pass

class SessionClosedError(MetalizeException):
    """Session used after end_connection()"""
    pass
