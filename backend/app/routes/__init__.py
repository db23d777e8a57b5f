# Routes package init
"""
Salon Backend — API Routes Package
====================================

Route Inventory:
    - stylists.py: POST/GET /api/stylists, PUT /api/stylists/{id}/inactive|active,
                   DELETE /api/stylists/{id}
    - files.py:    GET /api/files/{path}   (locally stored photos)
    - health.py:   GET /health

Routes are THIN: extract request data, call the service, return its model.
"""
