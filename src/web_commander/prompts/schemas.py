"""
Schemas - Structured output definitions for completion responses.
"""

import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from web_commander.exceptions.service import InvalidResponseError


class LinkCandidate(BaseModel):
    """
    The link the model picked for an intent.
    
    Attributes:
        anchor: The link text as shown on the page
        url: The link target (``href`` as it appears in the markup)
    """
    model_config = ConfigDict(extra="ignore")
    
    anchor: str = ""
    url: str = ""

    @field_validator("anchor", "url", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value
    
    @property
    def is_usable(self) -> bool:
        return bool(self.url.strip())


def extract_json_text(text: str) -> str:
    """Strip markdown code fences around a JSON answer."""
    json_text = text.strip()
    if "```json" in json_text:
        start = json_text.find("```json") + 7
        end = json_text.find("```", start)
        json_text = json_text[start:end].strip()
    elif "```" in json_text:
        start = json_text.find("```") + 3
        end = json_text.find("```", start)
        json_text = json_text[start:end].strip()
    return json_text


def parse_link_candidate(text: str) -> Optional[LinkCandidate]:
    """
    Parse the model's answer to the best-link prompt.
    
    Args:
        text: Raw completion text, a JSON object ``{"anchor": ..., "url": ...}``
        
    Returns:
        The candidate, or None when the model answered with nothing (empty
        text, ``null`` or ``{}``)
        
    Raises:
        InvalidResponseError: If the text is not JSON or has the wrong shape
    """
    json_text = extract_json_text(text)
    if not json_text:
        return None
    
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise InvalidResponseError(f"JSON parse error: {e}", raw_response=text)
    
    if data is None or data == {}:
        return None
    if not isinstance(data, dict):
        raise InvalidResponseError(f"Expected a JSON object, got {type(data).__name__}", raw_response=text)
    
    try:
        return LinkCandidate(**data)
    except ValidationError as e:
        raise InvalidResponseError(f"Validation error: {e}", raw_response=text)
