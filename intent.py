# intent.py
"""AI intent layer: asks a chat-completion model how likely a lead is to buy.

The classifier never raises. Whatever goes wrong (no key, network, timeout,
odd response shape) the lead is scored as Medium so a scoring run can carry on.
"""
import json
import logging
import re
import textwrap
from typing import Literal, Optional, Union

from openai import OpenAI
from pydantic import BaseModel

from config import get_settings
from models import Lead, Offer

logger = logging.getLogger(__name__)

TEMPERATURE = 0.0
MAX_TOKENS = 150

INTENT_POINTS = {"High": 50, "Medium": 30, "Low": 10}
DEFAULT_INTENT = "Medium"
DEFAULT_REASONING = "AI analysis completed"
UNAVAILABLE_REASONING = "AI unavailable, defaulted to Medium"

_INTENT_RE = re.compile(r"\b(High|Medium|Low)\b", re.IGNORECASE)


class IntentResult(BaseModel):
    intent: str
    reasoning: str
    points: int


FALLBACK = IntentResult(intent=DEFAULT_INTENT, reasoning=UNAVAILABLE_REASONING, points=INTENT_POINTS[DEFAULT_INTENT])


# --- parse outcomes ---
class StructuredParse(BaseModel):
    kind: Literal["structured"] = "structured"
    intent: str
    reasoning: str

class RegexFallback(BaseModel):
    kind: Literal["regex"] = "regex"
    intent: str
    reasoning: str

class HardDefault(BaseModel):
    kind: Literal["default"] = "default"
    intent: str = DEFAULT_INTENT
    reasoning: str

ParsedIntent = Union[StructuredParse, RegexFallback, HardDefault]


def intent_points(intent: str) -> int:
    """Points for an intent label. Unknown labels count as Medium."""
    return INTENT_POINTS.get(intent, INTENT_POINTS[DEFAULT_INTENT])


PROMPT_TEMPLATE = textwrap.dedent("""\
    You are a B2B lead qualification expert. Analyze this lead against the offer.

    Offer: {offer_name}
    Value Props: {value_props}
    Ideal Use Cases: {ideal_use_cases}

    Lead:
    - Name: {name}
    - Role: {role}
    - Company: {company}
    - Industry: {industry}
    - Location: {location}
    - LinkedIn Bio: {linkedin_bio}

    Classify this lead's intent as High, Medium, or Low. Respond ONLY with valid JSON in this exact format:
    {{"intent":"High","reasoning":"Your 1-2 sentence explanation here"}}""")


def build_prompt(lead: Lead, offer: Offer) -> str:
    return PROMPT_TEMPLATE.format(
        offer_name=offer.name,
        value_props=", ".join(offer.value_props),
        ideal_use_cases=", ".join(offer.ideal_use_cases),
        name=lead.name,
        role=lead.role,
        company=lead.company,
        industry=lead.industry,
        location=lead.location,
        linkedin_bio=lead.linkedin_bio,
    )


def parse_response(text: str) -> ParsedIntent:
    try:
        data = json.loads(text)
    except ValueError:
        m = _INTENT_RE.search(text)
        if m:
            # matched casing is kept; "high" is an unknown label worth Medium points
            return RegexFallback(intent=m.group(1), reasoning=text)
        return HardDefault(reasoning=text)

    if data is None:
        raise ValueError("completion returned JSON null")
    if not isinstance(data, dict):
        return StructuredParse(intent=DEFAULT_INTENT, reasoning=DEFAULT_REASONING)
    return StructuredParse(
        intent=str(data.get("intent") or DEFAULT_INTENT),
        reasoning=str(data.get("reasoning") or DEFAULT_REASONING),
    )


class IntentClassifier:
    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None):
        settings = get_settings()
        self.model = model or settings.openai_model
        self._client = client

    @property
    def client(self) -> Optional[OpenAI]:
        if self._client is None:
            settings = get_settings()
            if not settings.openai_api_key:
                return None
            self._client = OpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.openai_timeout,
            )
        return self._client

    def complete(self, prompt: str) -> str:
        client = self.client
        if client is None:
            raise RuntimeError("OPENAI_API_KEY is not set")
        resp = client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
        return resp.choices[0].message.content.strip()

    def classify(self, lead: Lead, offer: Offer) -> IntentResult:
        try:
            text = self.complete(build_prompt(lead, offer))
            parsed = parse_response(text)
            logger.debug("Lead %s intent parsed via %s: %s", lead.id, parsed.kind, parsed.intent)
            return IntentResult(intent=parsed.intent, reasoning=parsed.reasoning, points=intent_points(parsed.intent))
        except Exception as e:
            logger.warning("AI scoring error for lead %s: %s", lead.id, e)
            return FALLBACK.model_copy()
