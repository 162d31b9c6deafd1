"""Property-based tests for profile normalization, defaults and patching"""

import pytest
from hypothesis import given, settings, strategies as st

from backend.app.core.exceptions import ValidationException
from backend.app.schemas.profile import SECTION_NAMES
from backend.app.services.profile_builder import (
    ProfileHints,
    apply_section_patch,
    build_default_profile,
    is_number,
    normalize_candidate,
    recommendation_for,
)
from tests.conftest import sample_profile


json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=20),
)
json_values = st.recursive(
    json_scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(max_size=10), children, max_size=4),
    ),
    max_leaves=12,
)

cv_sections = st.one_of(
    st.none(),
    json_scalars,
    st.fixed_dictionaries(
        {},
        optional={
            "highlights": st.lists(st.text(max_size=20), max_size=3),
            "keyInsights": st.lists(st.text(max_size=20), max_size=3),
            "score": json_scalars,
        },
    ),
)

profiles = st.one_of(
    st.none(),
    json_scalars,
    st.fixed_dictionaries(
        {},
        optional={
            "cv": cv_sections,
            "career": json_values,
            "skills": json_values,
            "recommendation": json_scalars,
        },
    ),
)

candidate_records = st.fixed_dictionaries(
    {
        "name": st.text(max_size=20),
        "ai_score": json_scalars,
        "candidate_profile": profiles,
    }
)

ai_scores = st.one_of(st.none(), st.floats(min_value=0, max_value=100, allow_nan=False))


@pytest.mark.property
class TestNormalizationProperties:
    """Normalization is total and idempotent"""

    @given(record=candidate_records)
    @settings(max_examples=200)
    def test_normalize_is_idempotent(self, record):
        once = normalize_candidate(record)

        assert normalize_candidate(once) == once

    @given(record=candidate_records)
    @settings(max_examples=200)
    def test_normalized_profile_has_numeric_cv_score(self, record):
        normalized = normalize_candidate(record)

        profile = normalized["candidate_profile"]
        if isinstance(profile, dict):
            assert is_number(profile["cv"]["score"])
        else:
            assert profile == record["candidate_profile"]

    @given(record=candidate_records)
    def test_normalize_does_not_mutate_input(self, record):
        snapshot = repr(record)

        normalize_candidate(record)

        assert repr(record) == snapshot

    def test_none_passes_through(self):
        assert normalize_candidate(None) is None


@pytest.mark.property
class TestDefaultProfileProperties:
    """Placeholder profiles are complete and derived from ai_score"""

    @given(position=st.one_of(st.none(), st.text(max_size=30)), ai_score=ai_scores)
    def test_default_profile_is_complete(self, position, ai_score):
        profile = build_default_profile(ProfileHints(position=position, ai_score=ai_score))

        assert set(SECTION_NAMES) <= set(profile)
        assert profile["recommendation"] in ("Strongly Recommend", "Recommend", "Consider")
        for category in ("technical", "soft", "culture"):
            assert 0 <= profile["skills"][category]["overallScore"] <= 100

    @given(ai_score=ai_scores)
    def test_recommendation_matches_thresholds(self, ai_score):
        expected = "Consider"
        if ai_score and ai_score > 85:
            expected = "Strongly Recommend"
        elif ai_score and ai_score > 70:
            expected = "Recommend"

        assert recommendation_for(ai_score) == expected

    @given(ai_score=st.floats(min_value=1, max_value=100, allow_nan=False))
    def test_category_scores_follow_weights(self, ai_score):
        skills = build_default_profile(ProfileHints(ai_score=ai_score))["skills"]

        assert skills["soft"]["overallScore"] >= skills["culture"]["overallScore"]
        assert skills["culture"]["overallScore"] >= skills["technical"]["overallScore"]


@pytest.mark.property
class TestSectionPatchProperties:
    """Patching replaces exactly one section"""

    @given(section=st.sampled_from(SECTION_NAMES), value=json_values)
    def test_patch_isolates_other_sections(self, section, value):
        profile = sample_profile()

        merged = apply_section_patch(profile, section, value)

        assert merged[section] == value
        for other in set(profile) - {section}:
            assert merged[other] == profile[other]

    @given(section=st.sampled_from(SECTION_NAMES), value=json_values)
    def test_patch_on_missing_profile_starts_from_blank(self, section, value):
        merged = apply_section_patch(None, section, value)

        expected = build_default_profile()
        expected[section] = value
        assert merged == expected

    @given(section=st.text(max_size=20).filter(lambda name: name not in SECTION_NAMES))
    def test_unknown_sections_are_rejected(self, section):
        with pytest.raises(ValidationException):
            apply_section_patch(sample_profile(), section, {})
