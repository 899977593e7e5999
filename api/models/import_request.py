"""
Pydantic models for batch location import requests and responses.
"""

import base64
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class ImportRequest(BaseModel):
    """
    Request model for the batch import endpoints.

    Accepts either pasted JSON text or a base64-encoded uploaded file.
    Exactly one input method must be provided.
    """

    json_content: Optional[str] = Field(
        None,
        description="JSON document pasted as text"
    )

    file_content: Optional[str] = Field(
        None,
        description="Base64-encoded contents of an uploaded .json file"
    )

    file_name: Optional[str] = Field(
        None,
        description="Original name of the uploaded file; must end in .json"
    )

    selected_indices: Optional[List[int]] = Field(
        None,
        description="Indices of the records to import. Defaults to every record."
    )

    @model_validator(mode='after')
    def validate_exclusive_input(self):
        """Ensure exactly one input method is provided."""
        has_text = self.json_content is not None
        has_file = self.file_content is not None

        if not has_text and not has_file:
            raise ValueError("Either 'json_content' or 'file_content' must be provided")

        if has_text and has_file:
            raise ValueError("Provide either 'json_content' or 'file_content', not both")

        if has_text and not self.json_content.strip():
            raise ValueError("Please enter JSON data")

        return self

    @field_validator('file_content')
    @classmethod
    def validate_base64(cls, v: Optional[str]) -> Optional[str]:
        """Validate that file_content is valid base64."""
        if v is None:
            return v

        try:
            base64.b64decode(v, validate=True)
            return v
        except Exception:
            raise ValueError("file_content must be valid base64-encoded string")

    @field_validator('file_name')
    @classmethod
    def validate_file_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.lower().endswith('.json'):
            raise ValueError("Please select a JSON file")
        return v

    def get_json_text(self) -> str:
        """
        Return the JSON document as text, decoding the upload if needed.

        Returns:
            The raw JSON string
        """
        if self.json_content is not None:
            return self.json_content

        try:
            decoded = base64.b64decode(self.file_content)
            try:
                return decoded.decode('utf-8-sig')
            except UnicodeDecodeError:
                return decoded.decode('latin-1')
        except Exception as e:
            raise ValueError(f"Failed to decode file content: {str(e)}")

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "examples": [
                {
                    "json_content": "[{\"name\": \"Downtown Food Bank\", \"address\": \"123 Main St\", \"city\": \"San Diego\", \"state\": \"CA\"}]"
                },
                {
                    "file_content": "W3sibmFtZSI6ICJDcmlzaXMgTGluZSIsICJvbmxpbmVPbmx5IjogdHJ1ZSwgInBob25lIjogIjk4OCJ9XQ==",
                    "file_name": "locations.json",
                    "selected_indices": [0]
                }
            ]
        }


class ImportResponse(BaseModel):
    """
    Response model for the batch import endpoint.
    """

    job_id: str = Field(..., description="Unique identifier for the import job")

    status: str = Field(
        ...,
        description="Job status: 'completed', 'completed_with_errors', or 'failed'"
    )

    message: Optional[str] = Field(
        None,
        description="Human-readable status message"
    )

    summary: Optional[dict] = Field(
        None,
        description="Counts: total, success, failed"
    )

    errors: Optional[list] = Field(
        None,
        description="Per-record failures as {index, name, error}"
    )

    progress: Optional[float] = Field(
        None,
        description="Percentage of selected records processed"
    )

    error: Optional[str] = Field(
        None,
        description="Main error message if the job failed"
    )

    execution_time_seconds: Optional[float] = Field(
        None,
        description="Total execution time in seconds"
    )


class PreviewResponse(BaseModel):
    """Validated records shown to the admin before committing an import."""

    total: int = Field(..., description="Number of records in the document")
    valid: int = Field(..., description="Number of records that passed validation")
    invalid: int = Field(..., description="Number of records with validation errors")
    locations: list = Field(..., description="Normalized records with _index, _valid, _errors, _selected")
