# Services package init
"""
Notekeeper — Services Layer
=============================

What:  Business logic sitting between routes (HTTP) and the database.

Service Inventory:
    - AuthService: bcrypt password hashing, login, JWT issue/verify
    - UserService: credential store lookups, registration, user listing
    - NoteService: note list/get/create/delete with ownership checks

`user_service` and `note_service` are stateless module singletons; the database
session is passed into every call. AuthService holds the signing secret and
hashing cost, so create_app() builds one per app from its Settings.
"""
