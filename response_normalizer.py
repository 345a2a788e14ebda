"""
Turns raw design-service text into a RobotDesign.

The text is expected to be JSON but may be wrapped in a fenced code block or
surrounded by commentary. Extraction runs an ordered chain of strategies; the
first candidate that decodes to a JSON object wins.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from errors import ResponseFormatError
from robot_schema import RobotDesign, build_robot_design


class JsonExtractor(ABC):
    """One strategy for locating a JSON object inside free text"""

    name = "extractor"

    @abstractmethod
    def candidate(self, text: str) -> Optional[str]:
        """Return the candidate JSON text, or None if this strategy finds nothing"""


class FencedJsonExtractor(JsonExtractor):
    """Contents of the first ```json fenced block"""

    name = "fenced-block"
    _pattern = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)

    def candidate(self, text: str) -> Optional[str]:
        match = self._pattern.search(text)
        return match.group(1) if match else None


class BalancedObjectExtractor(JsonExtractor):
    """
    First brace-balanced object literal that decodes as a JSON object.

    Braces inside strings are ignored. A span that does not decode, or an
    opening brace that never closes, moves the scan on to the next `{`, so
    stray braces in surrounding prose do not hide the real object.
    """

    name = "balanced-object"

    def candidate(self, text: str) -> Optional[str]:
        start_idx = text.find('{')
        while start_idx != -1:
            end_idx = self._closing_index(text, start_idx)
            if end_idx is not None:
                span = text[start_idx:end_idx + 1]
                if self._is_object(span):
                    return span
            start_idx = text.find('{', start_idx + 1)
        return None

    @staticmethod
    def _closing_index(text: str, start_idx: int) -> Optional[int]:
        depth = 0
        in_str = False
        esc = False
        for i in range(start_idx, len(text)):
            ch = text[i]
            if in_str:
                if esc:
                    esc = False
                elif ch == '\\':
                    esc = True
                elif ch == '"':
                    in_str = False
                continue
            if ch == '"':
                in_str = True
            elif ch == '{':
                depth += 1
            elif ch == '}':
                depth -= 1
                if depth == 0:
                    return i
        return None

    @staticmethod
    def _is_object(span: str) -> bool:
        try:
            return isinstance(json.loads(span), dict)
        except json.JSONDecodeError:
            return False


class RawTextExtractor(JsonExtractor):
    """The whole text as-is"""

    name = "raw-text"

    def candidate(self, text: str) -> Optional[str]:
        return text


DEFAULT_EXTRACTORS: List[JsonExtractor] = [
    FencedJsonExtractor(),
    BalancedObjectExtractor(),
    RawTextExtractor(),
]


def strip_fences(candidate: str) -> str:
    """Remove leftover markdown fence markers around a candidate"""
    candidate = re.sub(r"^```(?:json)?\s*", "", candidate.strip(), flags=re.IGNORECASE)
    candidate = re.sub(r"\s*```$", "", candidate.strip())
    return candidate.strip()


def extract_json_object(
    raw_text: str,
    extractors: Sequence[JsonExtractor] = DEFAULT_EXTRACTORS,
) -> Dict[str, Any]:
    """
    Run the extractor chain over raw_text and decode the first usable candidate.

    Args:
        raw_text: Text returned by the design-generation service
        extractors: Ordered strategies; first successful strict decode wins

    Returns:
        Decoded JSON object

    Raises:
        ResponseFormatError: If no strategy yields a JSON object
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ResponseFormatError("Empty response text", raw_text=raw_text or "")

    for extractor in extractors:
        candidate = extractor.candidate(raw_text)
        if candidate is None:
            continue
        try:
            decoded = json.loads(strip_fences(candidate))
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, dict):
            return decoded

    tried = ", ".join(extractor.name for extractor in extractors)
    print(f"[NORMALIZER] No JSON object found (tried {tried}). Raw text: {raw_text[:500]}")
    raise ResponseFormatError("Failed to parse AI response as JSON.", raw_text=raw_text)


def normalize_design_response(
    raw_text: str,
    extractors: Sequence[JsonExtractor] = DEFAULT_EXTRACTORS,
) -> RobotDesign:
    """
    Convert a raw design payload into a RobotDesign with defaults applied.

    Raises:
        ResponseFormatError: If the payload holds no decodable object at all
    """
    return build_robot_design(extract_json_object(raw_text, extractors))
