class ServerFault(Exception):
    """Infrastructure problem on our side; callers answer with a generic 500."""


class ConfigurationError(ServerFault):
    pass


class StorageError(ServerFault):
    pass
