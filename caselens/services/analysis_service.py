# caselens/services/analysis_service.py
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from caselens.core.config import Settings
from caselens.models.case import Case
from caselens.services.case_service import CaseService
from caselens.services.errors import AnalysisNotFoundError, AnalysisServiceError, NoImagesError
from caselens.services.llm import AIProviderNotConfigured, chat_completion
from caselens.utils.analysis_parser import parse_analysis
from caselens.utils.case_context import build_case_context, image_content_parts

logger = logging.getLogger(__name__)

# low temperature keeps the model literal
ANALYSIS_TEMPERATURE = 0.1

FORENSIC_PROMPT = """You are a professional forensic investigator and evidence analyst. Give detailed, factual observations based ONLY on what is clearly visible in the images and on the case information provided. Do NOT assume, speculate, or infer anything beyond what can be directly observed.

**CRITICAL INSTRUCTION:** Never answer with a generic statement such as "I'm unable to provide a detailed forensic analysis" or a "general overview". You MUST describe specifically what is actually visible in each image.

**OBSERVATION PROTOCOL:**
1. **Image Description**: Objectively describe what each image shows: colors, shapes, objects, people, text and how they are arranged.
2. **Object Identification**: List every clearly visible object, person, text and element, with quantities, sizes and positions.
3. **Environmental Details**: Note location indicators, time of day, weather, lighting and background elements.
4. **Physical Evidence**: Document anything that could be evidence (documents, objects, marks, damage) precisely.
5. **Anomalies**: Point out anything clearly unusual or out of place without speculating about causes.
6. **Text/Content**: Transcribe readable text, numbers and markings exactly, including fonts, colors and context.

**CASE CONTEXT INTEGRATION:**
- Cross-reference observations with the case details provided
- Note consistencies and discrepancies between the images and the case description
- Identify details that support or contradict the reported incident

**REPORTING REQUIREMENTS:**
- Factual, objective language only
- When there are several images, say which image each observation comes from
- Include measurements, colors and other specifics whenever they are clearly visible
- No speculation about causes, motives or unseen events
- State explicitly when something is unclear or ambiguous
- Prefer comprehensive detail over vague summaries

**Case Context:** {case_context}

**Analysis Focus:** Analyze each image on its own and give specific, detailed observations. For every image describe exactly:
- Colors, shapes and textures
- Objects and their positions relative to each other
- Any text, numbers or markings that can be read
- Environmental conditions and lighting
- Damage, marks or unusual features
- Spatial relationships between all visible elements

Structure the response image by image, starting each section with "Image N:", then cross-reference the images if there are several. Be extremely detailed and specific and avoid generic statements."""


class CaseAnalysisService:
    """Runs a vision model over a case's photos and stores the parsed result on the case."""

    def __init__(self, case_service: CaseService, client: Optional[OpenAI], settings: Settings):
        self.case_service = case_service
        self.client = client
        self.model = settings.VISION_MODEL

    def build_messages(self, case: Case) -> list:
        prompt = FORENSIC_PROMPT.format(case_context=build_case_context(case))
        content = [{"type": "text", "text": prompt}]
        content.extend(image_content_parts(case.images))
        return [{"role": "user", "content": content}]

    def analyze(self, case: Case) -> dict:
        if not case.images:
            raise NoImagesError()

        messages = self.build_messages(case)
        try:
            text = chat_completion(self.client, self.model, messages, ANALYSIS_TEMPERATURE)
        except (OpenAIError, AIProviderNotConfigured, ValueError) as e:
            logger.exception("AI analysis failed for case %s", case.id)
            raise AnalysisServiceError(str(e)) from e

        summary, insights = parse_analysis(text)
        self.case_service.save_analysis(case, summary, insights)
        logger.info("Analyzed case %s: %d image(s), %d insight(s)", case.id, len(case.images), len(insights))
        return case.analysis

    def analyze_case(self, case_id: str) -> dict:
        return self.analyze(self.case_service.require_case(case_id))

    def get_analysis(self, case_id: str) -> dict:
        case = self.case_service.require_case(case_id)
        if case.analysis is None:
            raise AnalysisNotFoundError(case_id)
        return case.analysis
