"""
packages/ — Self-contained feature packages composed into the main app.

Each package owns its models and seed rows and exposes one function:

    register(registry: SchemaRegistry, config) -> None

which appends its tables and seed rows to the shared schema registry.
The main app (app/database.py) owns the registry and calls every package's
register() exactly once at startup, in dependency order.
"""
