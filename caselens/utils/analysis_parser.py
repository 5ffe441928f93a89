# caselens/utils/analysis_parser.py
import re
from typing import List, Optional, Tuple

SUMMARY_PLACEHOLDER = "Detailed forensic image analysis completed."
MAX_PARAGRAPH_INSIGHTS = 10
MIN_PARAGRAPH_LENGTH = 20

# paragraphs containing these are the model echoing our own prompt back
PROMPT_ECHO_MARKERS = ("case context", "analysis focus", "observation protocol")

_IMAGE_SUMMARY = re.compile(r"Image \d+.*?:\s*(.*?)(?=\nImage|\n\*\*|\n\n|\Z)", re.S)
_LEADING_PARAGRAPH = re.compile(r"(.*?)(?=\n\*\*|\n\n|\Z)", re.S)
_IMAGE_SECTION = re.compile(r"Image \d+:.*?(?=Image \d+|\Z)", re.S)
_IMAGE_MARKER = re.compile(r"Image \d+:\s*")


def extract_summary(text: str) -> str:
    """
    First "Image N...: <text>" statement, else the leading paragraph,
    else a fixed placeholder.
    """
    match = _IMAGE_SUMMARY.search(text) or _LEADING_PARAGRAPH.match(text)
    summary = match.group(1).strip() if match else ""
    return summary or SUMMARY_PLACEHOLDER


def split_image_sections(text: str) -> List[str]:
    """
    One labelled insight per "Image N:" section.

    Labels are numbered by position, so a reply that skips or repeats numbers
    still renders as a clean 1..K list.
    """
    insights = []
    for index, section in enumerate(_IMAGE_SECTION.findall(text), start=1):
        body = _IMAGE_MARKER.sub("", section, count=1).strip()
        insights.append(f"**Image {index} Observations:** {body}")
    return insights


def _is_insight_paragraph(paragraph: str) -> bool:
    if len(paragraph.strip()) <= MIN_PARAGRAPH_LENGTH:
        return False
    lowered = paragraph.lower()
    return not any(marker in lowered for marker in PROMPT_ECHO_MARKERS)


def split_paragraphs(text: str) -> List[str]:
    """
    Fallback for replies without image markers: substantial paragraphs
    that are not echoes of the prompt, capped at ten.
    """
    paragraphs = [p for p in text.split("\n\n") if _is_insight_paragraph(p)]
    return [p.strip() for p in paragraphs[:MAX_PARAGRAPH_INSIGHTS]]


def extract_insights(text: str) -> List[str]:
    return split_image_sections(text) or split_paragraphs(text)


def parse_analysis(text: Optional[str]) -> Tuple[str, List[str]]:
    text = text or ""
    return extract_summary(text), extract_insights(text)
