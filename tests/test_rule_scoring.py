from models import Lead
from scoring import combine, rule_score


def test_decision_maker_core_industry_complete_profile():
    lead = Lead(name="Sam", role="CEO", company="Initech", industry="Enterprise Software", location="Austin", linkedin_bio="Builds things")
    assert rule_score(lead) == 50


def test_blank_lead_scores_zero():
    lead = Lead(name="Sam", role="", industry="", company="Initech", location="   ", linkedin_bio=None)
    assert rule_score(lead) == 0


def test_influencer_and_adjacent_industry():
    lead = Lead(name="Kim", role="Marketing Manager", industry="Finance")
    assert rule_score(lead) == 10 + 10


def test_decision_maker_checked_before_influencer():
    lead = Lead(name="Kim", role="Lead Director", industry="Retail")
    assert rule_score(lead) == 20


def test_core_industry_checked_before_adjacent():
    lead = Lead(name="Kim", role="Analyst", industry="Healthcare Tech")
    assert rule_score(lead) == 20


def test_keyword_match_is_case_insensitive_substring():
    lead = Lead(name="Kim", role="Head of Growth", industry="FinTech")
    assert rule_score(lead) == 40


def test_completeness_needs_every_field_non_blank():
    base = dict(name="Kim", role="Clerk", company="Acme", industry="Retail", location="NY", linkedin_bio="bio")
    assert rule_score(Lead(**base)) == 10
    for field in ["name", "role", "company", "industry", "location", "linkedin_bio"]:
        assert rule_score(Lead(**{**base, field: "  "})) == 0


def test_rule_score_stays_in_range():
    roles = ["", "ceo", "manager", "vp engineering", "cto and founder", "intern"]
    industries = ["", "saas", "finance", "tech healthcare", "mining"]
    for role in roles:
        for industry in industries:
            lead = Lead(name="A", role=role, company="B", industry=industry, location="C", linkedin_bio="D")
            assert 0 <= rule_score(lead) <= 50


def test_combine_caps_at_100():
    assert combine(50, 50) == 100
    assert combine(40, 30) == 70
    assert combine(0, 10) == 10
    assert combine(80, 50) == 100


def test_combine_range():
    for r in range(0, 51, 5):
        for p in (10, 30, 50):
            final = combine(r, p)
            assert 0 <= final <= 100
            assert final == min(r + p, 100)
