"""API router configuration.

This module configures the main API router and includes all endpoint routers
for different features of the application.
"""

from fastapi import APIRouter

from zenith.api.endpoints import auth, categories, comments, health, moderator, posts, tags, users

api_router = APIRouter()

# Include all API routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(comments.post_comments_router, prefix="/posts", tags=["comments"])
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])

# Role-gated sub-trees
api_router.include_router(moderator.router, prefix="/moderator", tags=["moderator"])
api_router.include_router(categories.admin_router, prefix="/admin/categories", tags=["admin"])
api_router.include_router(tags.admin_router, prefix="/admin/tags", tags=["admin"])
