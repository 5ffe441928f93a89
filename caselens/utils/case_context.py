# caselens/utils/case_context.py
import base64
from datetime import datetime
from typing import Dict, List, Optional

from caselens.models.case import Case
from caselens.models.case_image import CaseImage


def _fmt_date(value: Optional[datetime]) -> str:
    return value.isoformat() if value else "Not specified"


def build_case_context(case: Case, detailed: bool = False) -> str:
    """Plain-text case summary placed in front of every analysis and chat prompt.

    ``detailed`` adds the status reason and whether an earlier analysis exists,
    which is what the chat assistant is given on top of the analysis context.
    """
    lines = [
        "Case Information:",
        f"- Title: {case.title}",
        f"- Description: {case.description or 'No description provided'}",
        f"- Location: {case.normalized_location or case.location_text or 'No location provided'}",
        f"- Date Reported: {_fmt_date(case.date_reported)}",
        f"- Severity: {case.severity}",
        f"- Status: {case.status}",
    ]
    if detailed:
        lines.append(f"- Status Reason: {case.status_reason or 'Not provided'}")
    lines.append(f"- Number of Images: {len(case.images)}")
    if detailed:
        if case.analyzed_at:
            lines.append(f"- Previous Analysis Available: Yes (analyzed on {_fmt_date(case.analyzed_at)})")
        else:
            lines.append("- Previous Analysis Available: No")
    return "\n".join(lines)


def image_reference(image: CaseImage) -> Optional[str]:
    # Prefer the https URL, then the plain one; rows from before the move to
    # object storage only have raw bytes and are sent inline.
    url = image.secure_remote_url or image.remote_url
    if url:
        return url
    if image.data:
        content_type = image.content_type or "image/jpeg"
        encoded = base64.b64encode(image.data).decode()
        return f"data:{content_type};base64,{encoded}"
    return None


def image_content_parts(images: List[CaseImage]) -> List[Dict]:
    parts = []
    for image in images:
        url = image_reference(image)
        if url:
            parts.append({"type": "image_url", "image_url": {"url": url}})
    return parts
