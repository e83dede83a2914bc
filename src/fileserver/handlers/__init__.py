"""
Request handlers.

    from fileserver.handlers import StaticFileHandler
    from fileserver.storage import FileStore

    handler = StaticFileHandler(FileStore("./public"))
    response = handler.handle(request)
"""

from .static import StaticFileHandler, ALLOWED_METHODS

__all__ = [
    "StaticFileHandler",
    "ALLOWED_METHODS",
]
