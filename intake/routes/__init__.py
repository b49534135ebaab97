from .core_routes import core
from .inquiry_routes import inquiry_bp
from .quotation_routes import quotation_bp
from .chat_routes import chat_bp

__all__ = ["core", "inquiry_bp", "quotation_bp", "chat_bp"]
