"""
Base class for all AI agents
"""
from abc import ABC, abstractmethod
from menu_backend.services.openai_service import OpenAIService, openai_service
from typing import Dict, Any, Optional


class BaseAgent(ABC):
    """
    Base class for the text generators behind the menu.
    Every agent has a deterministic fallback for when the LLM is unavailable.
    """

    def __init__(self, name: str, llm: Optional[OpenAIService] = None):
        self.name = name
        self.llm = llm or openai_service

    @abstractmethod
    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process the given context and return results
        """
        pass

    async def generate_response(
        self,
        prompt: str,
        lang: str = "nl",
        system_prompt: Optional[str] = None
    ) -> Optional[str]:
        """Wrapper for the OpenAI service; None means use the fallback"""
        return await self.llm.generate(prompt, lang=lang, system_prompt=system_prompt)
