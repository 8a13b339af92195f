# Routes package init
"""
HotOrNot Backend — API Routes Package
=======================================

Route Inventory:
    - images.py:    POST /api/upload, GET /api/images, GET /api/images/{id}
    - votes.py:     POST /api/vote/{id}
    - rankings.py:  GET  /api/top5
    - health.py:    GET  /health

Routes stay thin: extract request data, call a service, return its result.
Errors are raised as application exceptions and formatted by main.py.
"""
