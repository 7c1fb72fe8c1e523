"""AgentPrompt data model."""

from datetime import datetime

from pydantic import BaseModel, Field

from racfella.models.journal import new_id


class AgentPrompt(BaseModel):
    """An editable prompt template stored in the database."""

    id: str = Field(default_factory=new_id, description="Prompt ID")
    name: str = Field(..., min_length=1, description="Lookup name (e.g. 'journal_summary')")
    title: str = Field(default="", description="Human-readable title")
    category: str = Field(default="general", description="Prompt category")
    content: str = Field(..., description="Template with {variable} placeholders")
    is_active: bool = Field(default=True, description="Inactive prompts fall back to built-ins")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last update timestamp")

    model_config = {"frozen": True}
