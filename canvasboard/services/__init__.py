"""
CanvasBoard — Services Layer
==============================

What:  Business logic between the routes (HTTP) and the database.
How:   Stateless service singletons; every method takes the request's
       AsyncSession and returns response schemas.

Service Inventory:
    - BoardService:      list/create/load/update/delete boards, connection layout
    - SectionService:    sections, including the un-section cascade on delete
    - CardService:       card placement, note write-through, connection cascade
    - ConnectionService: self/duplicate rejection
    - NoteService:       standalone note library
"""
