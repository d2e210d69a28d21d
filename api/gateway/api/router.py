from fastapi import APIRouter

from gateway.api.routes import adverts, articles, authors, categories, health, tags

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(articles.router, prefix="/articles", tags=["content"])
api_router.include_router(authors.router, prefix="/authors", tags=["content"])
api_router.include_router(categories.router, prefix="/categories", tags=["content"])
api_router.include_router(tags.router, prefix="/tags", tags=["content"])
api_router.include_router(adverts.router, tags=["editorial"])
