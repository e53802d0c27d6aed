"""
Games module - Game content for the engine.

Each game has its own subpackage with:
- Card, location and event definitions registered with the catalog
- Effect implementations
- Initial state setup
"""
