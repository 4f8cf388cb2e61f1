# Cursor MCP Servers
# File: tools/pdf.py
# Version: v2

"""PDF tools: read text and form fields, write text or fill a template."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, Field

from ..clients import pdf
from ..envelope import Success
from ..registry import ToolRegistry

SERVER_NAME = "PDF Server"


class ReadPdfParams(BaseModel):
    input: str = Field(description="PDF file path, data URL or base64 encoded PDF content")


class PdfContentParams(BaseModel):
    text: Optional[str] = Field(default=None, description="Text content to add to the PDF")
    form_fields: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("form_fields", "formFields"),
        description="Form field values keyed by field name",
    )


class WritePdfParams(BaseModel):
    content: PdfContentParams = Field(description="Content to write")
    template_pdf: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("template_pdf", "templatePdf"),
        description="Template PDF file path or base64 content to modify",
    )
    output_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("output_path", "outputPath"),
        description="Output file path (if not provided, returns base64)",
    )


def register_tools(registry: ToolRegistry) -> None:
    """Register PDF tools on the given registry."""

    @registry.tool(
        "read_pdf",
        ReadPdfParams,
        description="Read a PDF and extract its text and form field values.",
        error_context="Error reading PDF",
    )
    async def read_pdf(params: ReadPdfParams) -> Success:
        content = pdf.read_pdf(pdf.load_pdf_bytes(params.input))
        return Success("PDF read successfully", content.to_dict())

    @registry.tool(
        "write_pdf",
        WritePdfParams,
        description="Create a PDF from text, or fill the form fields of a template PDF.",
        error_context="Error writing PDF",
    )
    async def write_pdf(params: WritePdfParams) -> Success:
        template = None
        if params.template_pdf:
            template = pdf.load_pdf_bytes(params.template_pdf, what="Template file")

        data, skipped = pdf.write_pdf(
            text=params.content.text,
            form_fields=params.content.form_fields,
            template=template,
        )

        payload: Dict[str, Any] = {"success": True, "size": len(data), "skippedFields": skipped}
        if params.output_path:
            payload["outputPath"] = str(pdf.save_pdf(data, params.output_path))
        else:
            data_url = pdf.to_data_url(data)
            payload["base64Length"] = len(data_url) - len(pdf.DATA_URL_PREFIX)
            payload["dataUrl"] = data_url
        return Success("PDF written successfully", payload)


async def build() -> ToolRegistry:
    registry = ToolRegistry(SERVER_NAME)
    register_tools(registry)
    return registry
