# gallery/models/relations.py

from sqlalchemy.orm import relationship

from .artwork import Artwork
from .collection_item import CollectionItem
from .comment import Comment
from .comment_like import CommentLike
from .order import Order, OrderItem
from .reaction import Reaction
from .user import User


def setup_relationships():
    """
    Configure all SQLAlchemy relationships between models.
    """

    # --- Community ---

    # 1. Artwork to Comments (One-to-Many)
    Artwork.comments = relationship(
        "Comment",
        back_populates="artwork",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    Comment.artwork = relationship("Artwork", back_populates="comments")

    # 2. User to Comments (One-to-Many)
    User.comments = relationship(
        "Comment", back_populates="user", cascade="all, delete-orphan"
    )
    Comment.user = relationship("User", back_populates="comments")

    # 3. Comment to Likes (One-to-Many)
    Comment.likes = relationship(
        "CommentLike",
        back_populates="comment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    CommentLike.comment = relationship("Comment", back_populates="likes")

    # 4. Artwork to Reactions (One-to-Many)
    Artwork.reactions = relationship(
        "Reaction",
        back_populates="artwork",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    Reaction.artwork = relationship("Artwork", back_populates="reactions")

    # --- Catalogue ---

    # 5. Uploader to Artworks
    User.uploaded_artworks = relationship("Artwork", back_populates="uploader")
    Artwork.uploader = relationship("User", back_populates="uploaded_artworks")

    # 6. User collection (ordered by position)
    User.collection_items = relationship(
        "CollectionItem",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="CollectionItem.position",
    )
    CollectionItem.user = relationship("User", back_populates="collection_items")
    CollectionItem.artwork = relationship("Artwork")

    # --- Orders ---

    # 7. User to Orders
    User.orders = relationship("Order", back_populates="user")
    Order.user = relationship("User", back_populates="orders")

    # 8. Order to Items
    Order.items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan"
    )
    OrderItem.order = relationship("Order", back_populates="items")
