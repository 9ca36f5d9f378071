from membership.presentation.channel_join_requests.routes import router

__all__ = ["router"]
