"""Langflow integration for proposal generation and regeneration."""

import json
import logging
from typing import Any, Dict, Optional
import httpx

from governance_agent.core.config import get_settings
from governance_agent.core.errors import LangflowError

logger = logging.getLogger(__name__)


def build_regeneration_input(text: str, feedback: Optional[str] = None) -> str:
    """Frame the current text and optional user feedback for the regeneration flow."""
    if feedback and feedback.strip():
        return (
            f"Original: {text}\nFeedback: {feedback.strip()}\n\n"
            "Please regenerate the content considering this feedback."
        )
    return text


def extract_message_text(data: Any) -> Optional[str]:
    """
    Pull the generated text out of a Langflow run response.

    Looks at outputs[0].outputs[0].results.message.text first, then scans
    every output for results.message.text, results.text, and finally the
    JSON-encoded results object.

    Returns:
        The text, or None when the response has no usable outputs
    """
    try:
        text = data["outputs"][0]["outputs"][0]["results"]["message"]["text"]
        if isinstance(text, str) and text:
            return text
    except (KeyError, IndexError, TypeError):
        logger.debug("Standard Langflow message path missing, scanning outputs")

    outputs = data.get("outputs") if isinstance(data, dict) else None
    if not isinstance(outputs, list):
        return None

    for output in outputs:
        inner = output.get("outputs") if isinstance(output, dict) else None
        if not isinstance(inner, list) or not inner or not isinstance(inner[0], dict):
            continue

        results = inner[0].get("results")
        if not isinstance(results, dict):
            continue

        message = results.get("message")
        if isinstance(message, dict) and message.get("text"):
            return message["text"]
        if results.get("text"):
            return results["text"]
        return json.dumps(results)

    return None


class LangflowService:
    """
    Service for Langflow run API operations.

    Sends the governance idea (or a section to rewrite) to a hosted flow
    and returns the raw text the flow produced. Parsing is left to the
    caller.
    """

    def __init__(self):
        """Initialize service with settings."""
        self._settings = None

    @property
    def settings(self):
        """Lazy load settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _run_url(self, flow_id: str) -> str:
        base_url = self.settings.LANGFLOW_BASE_URL.rstrip("/")
        return f"{base_url}/api/v1/run/{flow_id}?stream=false"

    async def _run_flow(self, flow_id: str, input_value: str) -> Dict[str, Any]:
        """
        POST one input to a flow and return the decoded response body.

        Raises:
            LangflowError: On missing credentials, timeouts, HTTP or transport errors
        """
        if not self.settings.LANGFLOW_API_KEY:
            raise LangflowError(
                "Langflow API key not found. Set LANGFLOW_API_KEY in your environment."
            )

        payload = {
            "input_value": input_value,
            "output_type": "chat",
            "input_type": "chat",
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.settings.LANGFLOW_API_KEY,
        }

        try:
            async with httpx.AsyncClient(timeout=self.settings.LANGFLOW_TIMEOUT) as client:
                response = await client.post(
                    self._run_url(flow_id),
                    json=payload,
                    headers=headers
                )

                if response.status_code != 200:
                    logger.error(
                        f"Langflow API error: {response.status_code} - {response.text}"
                    )
                    raise LangflowError(f"Langflow returned status {response.status_code}")

                return response.json()

        except httpx.TimeoutException as e:
            logger.error("Langflow API timeout")
            raise LangflowError("Langflow request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Langflow transport error: {e}")
            raise LangflowError(f"Could not reach Langflow: {e}") from e
        except ValueError as e:
            logger.error(f"Langflow returned invalid JSON: {e}")
            raise LangflowError("Langflow returned an unreadable response") from e

    async def generate_proposal(self, idea: str) -> str:
        """
        Send a governance idea to the generation flow.

        Args:
            idea: Free-text governance idea

        Returns:
            Raw proposal text, unparsed
        """
        data = await self._run_flow(self.settings.LANGFLOW_GENERATE_FLOW_ID, idea)

        text = extract_message_text(data)
        if not text and isinstance(data, dict) and data.get("outputs"):
            text = json.dumps(data["outputs"])
        if not text:
            logger.warning("Generation response held no text")
            raise LangflowError("Generation response contained no text")

        logger.info(f"Raw proposal text (preview): {text[:100]}{'...' if len(text) > 100 else ''}")
        return text

    async def regenerate_section(self, text: str, feedback: Optional[str] = None) -> str:
        """
        Rewrite one section or item, optionally guided by feedback.

        Args:
            text: Current content of the section or item
            feedback: Optional user feedback

        Returns:
            Regenerated text, or the input text when the flow returned none
        """
        data = await self._run_flow(
            self.settings.LANGFLOW_REGENERATE_FLOW_ID,
            build_regeneration_input(text, feedback)
        )

        regenerated = extract_message_text(data)
        if not regenerated:
            logger.warning("Regeneration response held no text, keeping original")
            return text
        return regenerated


# Singleton instance
langflow_service = LangflowService()
