from socialite.api.routes import router

__all__ = ["router"]
