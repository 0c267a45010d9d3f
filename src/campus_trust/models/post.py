"""Posts and the peer accuracy ratings that drive credibility."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Post(Base):
    """A post filed under a scope, or the public square when scope is null."""

    __tablename__ = "posts"

    post_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    author_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    scope_id = Column(Uuid, ForeignKey("scopes.scope_id", ondelete="RESTRICT"))
    content = Column(String, nullable=False)
    credibility_rating = Column(Float, nullable=False, default=50.0)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    author = relationship("User", back_populates="posts")
    accuracy_ratings = relationship("PostAccuracyRating", back_populates="post")


class PostAccuracyRating(Base):
    """One rater's 1-5 star accuracy vote on a post; re-voting replaces it."""

    __tablename__ = "post_accuracy_ratings"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="post_accuracy_ratings_post_user_unique"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="post_accuracy_ratings_rating_range"),
    )

    rating_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid, ForeignKey("posts.post_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    post = relationship("Post", back_populates="accuracy_ratings")
