"""Named prompt templates"""

from sqlalchemy import Column, String, Text, Uuid
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin
import uuid


class PromptTemplate(Base, TimestampMixin):
    """Editable system prompt stored by name, e.g. ``cv_analysis``"""

    __tablename__ = "prompt_templates"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    last_updated = Column(String(50), nullable=True)
    updated_by = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<PromptTemplate(name={self.name})>"
