"""Canonical vocabulary models read by the concept caches"""
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    Boolean,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from ..database import Base


class CanonicalTag(Base):
    """Deduplicated product-feedback tag (e.g. "onboarding_friction")"""

    __tablename__ = "canonical_tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    slug = Column(String(200), nullable=False)
    description = Column(Text)  # Short explanation when/why this tag is used
    embedding_json = Column(Text)  # JSON float array; NULL/"" means not yet embedded
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("slug", name="uix_canonical_tags_slug"),
    )


class CanonicalTheme(Base):
    """Deduplicated theme (e.g. "pricing_white_label_blocker")"""

    __tablename__ = "canonical_themes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    slug = Column(String(200), nullable=False)
    description = Column(Text)
    embedding_json = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("slug", name="uix_canonical_themes_slug"),
    )


class SignalType(Base):
    """Signal-type catalog; only allowed_in_llm rows may be emitted by classification"""

    __tablename__ = "signal_types"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(64), nullable=False)  # "feature-launch"
    name = Column(String(64), nullable=False)  # "Feature Launch"
    description = Column(String(512))
    allowed_in_llm = Column(Boolean, nullable=False, default=False, index=True)

    __table_args__ = (
        UniqueConstraint("slug", name="uix_signal_types_slug"),
    )
