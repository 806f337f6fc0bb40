# Routes package init
"""
SimHub Backend — API Routes Package
===================================

What:  HTTP route handlers; the outermost adapter of the application.

Route Inventory:
    - simulations.py:  /api/simulations   (simulation history CRUD + search)
    - preferences.py:  /api/preferences   (per-user UI preferences)
    - projects.py:     /api/projects      (register / open projects)
    - recent_projects.py: /api/recent-projects (launcher's recently opened list)
    - health.py:       /health            (service health check)

Design Principle:
    Routes are THIN. They pull raw body, query string and path params off
    the request and pass them to a service. They declare no Pydantic input
    models: the services' validate_input() call is the only typed boundary,
    so every validation failure has the same 400 shape.
"""
