# Middleware package init
"""
Salon Backend — Middleware Package
====================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    1. Request ID first: the access log line and error bodies can include it
    2. Access log: one line per request once the response status is known
"""
