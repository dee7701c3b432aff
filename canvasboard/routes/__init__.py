"""
CanvasBoard — API Routes Package
==================================

Route Inventory:
    - boards.py:      GET/POST /api/boards, GET/PUT/DELETE /api/boards/{id},
                      GET /api/boards/{id}/layout
    - sections.py:    POST /api/sections, PUT/DELETE /api/sections/{id}
    - cards.py:       POST /api/cards, PUT/DELETE /api/cards/{id}
    - connections.py: POST /api/connections, DELETE /api/connections/{id}
    - notes.py:       GET/POST /api/notes
    - health.py:      GET /health

Routes are thin: they handle HTTP concerns only and delegate to services.
"""
