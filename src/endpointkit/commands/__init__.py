"""Built-in CLI commands: ``request``, ``profile``, and ``cache``."""
