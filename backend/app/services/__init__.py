# Services package init
"""
Salon Backend — Services Layer
================================

Service Inventory:
    - StylistService:    validation and create/list/status/delete orchestration
    - StylistRepository: async SQLAlchemy record store (typed ConflictError)
    - MediaService:      photo validation and upload (Cloudinary or local disk)
    - EmailService:      Resend delivery with SMTP fallback
"""
