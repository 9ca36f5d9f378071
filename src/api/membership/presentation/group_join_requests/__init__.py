from membership.presentation.group_join_requests.routes import router

__all__ = ["router"]
