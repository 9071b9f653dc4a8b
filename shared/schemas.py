"""
Pydantic schemas for API request/response models.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AddFileRequest(BaseModel):
    """Request model for adding a file to the context."""

    path: str = Field(..., min_length=1, description="Path of the file to add")


class CurrentFileRequest(BaseModel):
    """Request model for adding the editor's active file."""

    path: Optional[str] = Field(
        default=None, description="Path of the active file, if any"
    )


class AddFileResponse(BaseModel):
    """Successful add."""

    success: bool = True
    path: str
    char_count: int


class AddFileError(BaseModel):
    """Failed add; the context is unchanged."""

    success: bool = False
    kind: str
    message: str
    path: str = ""


class RemoveFileResponse(BaseModel):
    removed: bool


class FileListResponse(BaseModel):
    files: List[str]


class ContextStatsResponse(BaseModel):
    """Usage of the context window."""

    file_count: int
    char_count: int
    estimated_tokens: int
    max_tokens: int
    percentage: int


class ContextTextResponse(BaseModel):
    text: str
    stats: ContextStatsResponse


class ChatRequest(BaseModel):
    """Request model for a free-form question."""

    message: str = Field(..., min_length=1, description="The user's question")
    selected_text: Optional[str] = Field(
        default=None, description="Editor selection to include"
    )
    language: Optional[str] = Field(
        default=None, description="Language of the selection, used in code fences"
    )
    include_files: bool = Field(
        default=True, description="Whether to attach the selected files"
    )


class CompleteRequest(BaseModel):
    """Request model for code completion."""

    code: str = Field(..., description="Full text of the document to complete")
    language: Optional[str] = None


class RefactorRequest(BaseModel):
    """Request model for refactoring a selection."""

    selected_text: str = Field(..., description="Code to refactor")
    language: Optional[str] = None


class ChatResponse(BaseModel):
    """Answer from the assistant."""

    answer: str
    model: str
    context: ContextStatsResponse
    prompt_tokens: int
    usage: Dict[str, int] = Field(default_factory=dict)


class ChatMessageModel(BaseModel):
    role: str
    content: str
    timestamp: str


class ChatHistoryResponse(BaseModel):
    messages: List[ChatMessageModel]


class ProviderInfo(BaseModel):
    name: str
    base_url: str
    models: List[str]


class ConfigResponse(BaseModel):
    """Current assistant configuration; the key itself is never returned."""

    provider: str
    model: str
    temperature: float
    max_tokens: int
    has_api_key: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    provider: str
    has_api_key: bool
    context_files: int
