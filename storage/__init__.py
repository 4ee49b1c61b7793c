"""
Upload directory management.

Usage:
    from storage.uploads import UploadStorage

    storage = UploadStorage(settings.UPLOAD_DIR)
    info = await storage.save(upload_file)
    # info.relative_path == "uploads/<stored name>"
"""

__all__ = ["UploadStorage"]
