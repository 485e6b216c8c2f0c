"""
Sitechat Storage Records
========================

Pydantic models for training material rows as handed over by the
storage collaborator. Aligned with the training_materials columns
(snake_case); camelCase aliases are accepted for payloads coming
from the dashboard API.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..intelligence.models import ContentType, StructuredData
from ..relevance.models import TrainingMaterial

logger = logging.getLogger(__name__)


class TrainingMaterialRow(BaseModel):
    """One persisted training material with its content intelligence columns."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    content: Optional[str] = None
    summary: Optional[str] = None
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    # Content intelligence
    content_type: Optional[str] = Field(default=None, alias="contentType")
    structured_data: Dict[str, Any] = Field(default_factory=dict, alias="structuredData")
    intent_keywords: List[str] = Field(default_factory=list, alias="intentKeywords")
    primary_products: List[str] = Field(default_factory=list, alias="primaryProducts")
    confidence_score: Optional[float] = Field(default=None, alias="confidenceScore")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        # UUID columns come back as uuid.UUID
        return str(value) if value is not None else value

    @field_validator("title", mode="before")
    @classmethod
    def _null_title(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("key_points", "intent_keywords", "primary_products", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(v) for v in value if v is not None]
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("structured_data", mode="before")
    @classmethod
    def _decode_structured_data(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                logger.warning("Ignoring undecodable structured_data column")
                return {}
        if not isinstance(value, dict):
            logger.warning("Ignoring non-object structured_data column")
            return {}
        return value

    def parsed_content_type(self) -> Optional[ContentType]:
        """Known content type, or None so the query boost falls back to 1.0."""
        if not self.content_type:
            return None
        try:
            return ContentType(self.content_type)
        except ValueError:
            logger.warning(
                "Unknown content_type %r on material %s", self.content_type, self.id
            )
            return None

    def to_material(self) -> TrainingMaterial:
        structured = StructuredData.from_dict(self.structured_data)
        return TrainingMaterial(
            id=self.id,
            title=self.title,
            content=self.content,
            summary=self.summary,
            key_points=list(self.key_points),
            metadata=dict(self.metadata),
            content_type=self.parsed_content_type(),
            structured_data=None if structured.is_empty else structured,
            intent_keywords=list(self.intent_keywords),
            primary_products=list(self.primary_products),
            confidence_score=self.confidence_score,
        )


def rows_to_materials(rows: Iterable[Dict[str, Any]]) -> List[TrainingMaterial]:
    """
    Convert raw storage rows, skipping (and logging) rows that fail validation
    so one bad record never empties a site's whole context.
    """
    materials = []
    for row in rows:
        try:
            materials.append(TrainingMaterialRow.model_validate(row).to_material())
        except ValidationError as e:
            logger.warning(
                "Skipping invalid training material row %s: %s",
                row.get("id") if isinstance(row, dict) else None,
                e.errors()[0].get("msg") if e.errors() else e,
            )
    return materials
