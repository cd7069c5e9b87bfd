"""Platform GUI — server-rendered web front-end over the IoT platform REST API.

Invariants:
    - Package root has no import side-effects
"""

__version__ = "0.14.0"
