# scoring.py
import logging
from typing import List, Protocol

from models import Lead, Offer, ScoredLead, ScoringRun
from intent import IntentResult
from storage import LeadStore

logger = logging.getLogger(__name__)

RULE_MAX = 50
FINAL_MAX = 100

DECISION_MAKER_ROLES = ["ceo", "cto", "founder", "director", "vp", "head"]
INFLUENCER_ROLES = ["manager", "lead"]
CORE_INDUSTRIES = ["tech", "software", "saas"]
ADJACENT_INDUSTRIES = ["finance", "healthcare"]


class ScoringError(Exception):
    pass


class PreconditionError(ScoringError):
    """Raised before any lead is scored when a run cannot start."""


class Classifier(Protocol):
    def classify(self, lead: Lead, offer: Offer) -> IntentResult: ...


# --- Rule layer (max 50) ---
def rule_score(lead: Lead) -> int:
    points = 0

    # Role relevance
    role = (lead.role or "").lower()
    if any(k in role for k in DECISION_MAKER_ROLES):
        points += 20
    elif any(k in role for k in INFLUENCER_ROLES):
        points += 10

    # Industry match
    industry = (lead.industry or "").lower()
    if any(k in industry for k in CORE_INDUSTRIES):
        points += 20
    elif any(k in industry for k in ADJACENT_INDUSTRIES):
        points += 10

    # Data completeness
    if all(f and f.strip() for f in lead.profile_fields()):
        points += 10

    return min(points, RULE_MAX)


def combine(rule_points: int, ai_points: int) -> int:
    return min(rule_points + ai_points, FINAL_MAX)


# --- full pipeline per lead ---
def score_lead(lead: Lead, offer: Offer, classifier: Classifier) -> ScoredLead:
    r_points = rule_score(lead)
    ai = classifier.classify(lead, offer)
    return ScoredLead(
        lead_id=lead.id,
        name=lead.name,
        role=lead.role,
        company=lead.company,
        intent=ai.intent,
        score=combine(r_points, ai.points),
        reasoning=ai.reasoning,
    )


def run_scoring(store: LeadStore, classifier: Classifier) -> ScoringRun:
    """Score every lead against the latest offer and persist one result per lead.

    Leads are scored one after another. A store error stops the run; results
    written before it stay in the store.
    """
    leads = store.list_leads()
    offer = store.latest_offer()

    if offer is None:
        raise PreconditionError("No offer found. Please create an offer first.")
    if not leads:
        raise PreconditionError("No leads found. Please upload leads first.")

    logger.info("Scoring %d leads against offer %s (%s)", len(leads), offer.id, offer.name)
    results: List[ScoredLead] = []
    for lead in leads:
        out = score_lead(lead, offer, classifier)
        store.insert_result(lead.id, offer.id, out.intent, out.score, out.reasoning)
        logger.debug("Lead %s scored %d (%s)", lead.id, out.score, out.intent)
        results.append(out)

    logger.info("Scoring completed: %d results", len(results))
    return ScoringRun(count=len(results), results=results)
