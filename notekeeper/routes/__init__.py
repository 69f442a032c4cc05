# Routes package init
"""
Notekeeper — API Routes Package
=================================

Route Inventory:
    - auth.py:    POST   /api/login           (credentials → token)
    - notes.py:   GET    /api/notes           (list)
                  GET    /api/notes/{id}      (detail)
                  POST   /api/notes           (create, bearer token)
                  DELETE /api/notes/{id}      (delete own note, bearer token)
    - users.py:   POST   /api/users           (register)
                  GET    /api/users           (list with notes)
    - health.py:  GET    /health

Routes stay thin: extract input, call a service, set the status code.
"""
