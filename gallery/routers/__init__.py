from .ai import router as ai_router
from .analytics import router as analytics_router
from .artworks import router as artworks_router
from .auth import router as auth_router
from .checkout import router as checkout_router
from .collection import router as collection_router
from .community import router as community_router
from .orders import router as orders_router
from .printing import router as printing_router
from .upload import router as upload_router

routes = [
    auth_router,
    artworks_router,
    upload_router,
    community_router,
    collection_router,
    ai_router,
    checkout_router,
    orders_router,
    printing_router,
    analytics_router,
]
