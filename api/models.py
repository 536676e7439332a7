"""
Prompt Exporter API Models

Pydantic request/response models. Wire names are camelCase; Python code
uses snake_case through field aliases.
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Optional, Any

from core.exporter import BatchRequest, EnhancementOptions, ExportRequest


class _CamelModel(BaseModel):
    class Config:
        populate_by_name = True


# ==================== REQUEST MODELS ====================

class EnhancementOptionsModel(_CamelModel):
    """Per-request enhancement switches"""
    use_enhancement: Optional[bool] = Field(default=None, alias="useEnhancement")
    detail_level: Optional[str] = Field(
        default=None, alias="detailLevel", description="basic | standard | detailed"
    )
    include_metadata: bool = Field(default=True, alias="includeMetadata")

    def to_options(self) -> EnhancementOptions:
        return EnhancementOptions(
            use_enhancement=self.use_enhancement,
            detail_level=self.detail_level,
            include_metadata=self.include_metadata,
        )


class ExportPromptRequest(_CamelModel):
    """Request to export one prompt"""
    source_content: Optional[str] = Field(
        default=None, alias="sourceContent", description="Prompt text or JSON document"
    )
    source_type: str = Field(default="text", alias="sourceType", description="text | document | structured")
    target_platform: Optional[str] = Field(default=None, alias="targetPlatform")
    export_format: Optional[str] = Field(default=None, alias="exportFormat")
    enhancement_options: EnhancementOptionsModel = Field(
        default_factory=EnhancementOptionsModel, alias="enhancementOptions"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "sourceContent": "Cinematic urban scene with dramatic lighting",
                "sourceType": "text",
                "targetPlatform": "midjourney",
                "exportFormat": "json",
                "enhancementOptions": {
                    "useEnhancement": True,
                    "detailLevel": "standard",
                    "includeMetadata": True,
                },
            }
        }

    def to_request(self) -> ExportRequest:
        return ExportRequest(
            source_content=self.source_content,
            source_type=self.source_type,
            target_platform=self.target_platform,
            export_format=self.export_format,
            enhancement_options=self.enhancement_options.to_options(),
        )


class BatchExportRequest(_CamelModel):
    """Request to export every prompt in a folder"""
    folder_id: Optional[str] = Field(default=None, alias="folderId")
    target_platform: Optional[str] = Field(default=None, alias="targetPlatform")
    export_format: Optional[str] = Field(default=None, alias="exportFormat")
    enhancement_options: EnhancementOptionsModel = Field(
        default_factory=EnhancementOptionsModel, alias="enhancementOptions"
    )

    def to_request(self) -> BatchRequest:
        return BatchRequest(
            folder_id=self.folder_id,
            target_platform=self.target_platform,
            export_format=self.export_format,
            enhancement_options=self.enhancement_options.to_options(),
        )


# ==================== RESPONSE MODELS ====================

class ValidationModel(BaseModel):
    status: str
    warnings: List[str] = []
    errors: List[str] = []
    message: str = ""


class ExportedPromptModel(_CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    content: str
    platform: str
    format: str
    validation: ValidationModel
    metadata: Dict[str, Any] = {}
    file_name: Optional[str] = Field(default=None, alias="fileName")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    size_bytes: int = Field(default=0, alias="sizeBytes")
    url: Optional[str] = None
    enhanced: bool = False


class SummaryModel(_CamelModel):
    total_prompts: int = Field(alias="totalPrompts")
    valid_prompts: int = Field(alias="validPrompts")
    warning_prompts: int = Field(alias="warningPrompts")
    error_prompts: int = Field(alias="errorPrompts")


class ExportResponse(_CamelModel):
    """Result of a single or batch export"""
    exported_prompts: List[ExportedPromptModel] = Field(alias="exportedPrompts")
    summary: SummaryModel
    export_url: Optional[str] = Field(default=None, alias="exportUrl")


class PlatformModel(_CamelModel):
    id: str
    name: str
    supported_formats: List[str] = Field(alias="supportedFormats")
    max_content_length: int = Field(alias="maxContentLength")


class PlatformsResponse(BaseModel):
    platforms: List[PlatformModel]


class FormatModel(_CamelModel):
    id: str
    name: str
    mime_type: str = Field(alias="mimeType")
    extension: str


class FormatsResponse(BaseModel):
    formats: List[FormatModel]


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: float
