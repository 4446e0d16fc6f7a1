from .routes import portal_bp

__all__ = ['portal_bp']
