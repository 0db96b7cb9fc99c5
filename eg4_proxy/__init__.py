"""
EG4 session proxy package.

Relays a single authenticated session to the EG4 inverter monitoring web API
and reshapes its responses: station listing, live telemetry, working-mode
schedules and settings writes.

CHANGELOG:
- 2026-10-12: Initial creation

TODO:
- None
"""

__version__ = "0.1.0"
