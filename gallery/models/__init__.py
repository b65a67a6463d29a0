"""
Models package initialization
Import all models and setup relationships
"""

from .artwork import Artwork
from .collection_item import CollectionItem
from .comment import Comment
from .comment_like import CommentLike
from .order import Order, OrderItem
from .reaction import Reaction

# Import and setup relationships
from .relations import setup_relationships
from .user import User

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Artwork",
    "CollectionItem",
    "Comment",
    "CommentLike",
    "Order",
    "OrderItem",
    "Reaction",
    "User",
]
