# caselens/services/chat_service.py
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from caselens.core.config import Settings
from caselens.models.case import Case
from caselens.services.case_service import CaseService
from caselens.services.errors import ChatServiceError, EmptyQuestionError
from caselens.services.llm import AIProviderNotConfigured, chat_completion
from caselens.utils.case_context import build_case_context, image_content_parts

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.1

SYSTEM_PROMPT = """You are a professional forensic investigator assistant. Give detailed, factual observations based ONLY on what is clearly visible in the images and on the documented case information. Do NOT assume, speculate, or infer anything beyond what the evidence directly shows.

When answering questions:
1. Base every answer on visible evidence and documented case details only
2. Say clearly when something is not visible or not documented
3. Give specific, verifiable observations from the images where relevant
4. Cross-reference the case details with the visual evidence
5. Be precise about what can be confirmed and what would be speculation

Keep the language professional and objective, focused on facts rather than interpretation."""


class ChatService:
    """Stateless Q&A about one case; the caller keeps any transcript."""

    def __init__(self, case_service: CaseService, client: Optional[OpenAI], settings: Settings):
        self.case_service = case_service
        self.client = client
        self.vision_model = settings.VISION_MODEL
        self.text_model = settings.CHAT_MODEL

    def build_messages(self, case: Case, question: str) -> list:
        text = (
            f"{build_case_context(case, detailed=True)}\n\n"
            f"User Question: {question}\n\n"
            "Please provide a detailed, helpful answer based on the case information above. "
            "If images are available, reference what you can see in them. "
            "Be specific and professional in your response."
        )
        content = [{"type": "text", "text": text}]
        content.extend(image_content_parts(case.images))
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": content},
        ]

    def ask(self, case: Case, question: Optional[str]) -> str:
        if not question or not question.strip():
            raise EmptyQuestionError()

        model = self.vision_model if case.images else self.text_model
        try:
            return chat_completion(self.client, model, self.build_messages(case, question), CHAT_TEMPERATURE)
        except (OpenAIError, AIProviderNotConfigured, ValueError) as e:
            logger.exception("Chat failed for case %s", case.id)
            raise ChatServiceError(str(e)) from e

    def ask_about_case(self, case_id: str, question: Optional[str]) -> str:
        # a blank question is rejected before the case is even looked up
        if not question or not question.strip():
            raise EmptyQuestionError()
        return self.ask(self.case_service.require_case(case_id), question)
