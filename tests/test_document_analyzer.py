"""Tests for the HR document analyzer and its keyword fallback."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError, APIStatusError

from hr_assistant.config import get_settings
from hr_assistant.models.document_analysis import (
    DOCUMENT_CATEGORIES,
    DocumentAnalysisRequest,
    ParsedAnalysis,
    UnparseableAnalysis,
)
from hr_assistant.services.document_analyzer import (
    REMOTE_WORK_INSIGHT,
    TERMINATION_INSIGHT,
    analyze_document,
    analyze_document_fallback,
    build_analysis_prompt,
    categorize_document,
    extract_key_points,
    generate_insights,
    generate_recommendations,
    normalize_analysis,
    parse_analysis_response,
)
from hr_assistant.services.errors import LLMProviderError, ProviderNotConfiguredError

POLICY_CONTENT = (
    "This remote work policy was updated after a termination dispute. "
    "Employees must follow the handbook procedures carefully for every request submitted."
)

BASE_INSIGHTS = [
    "Document appears to contain important HR policy information",
    "May require regular review and updates based on changing regulations",
    "Could benefit from employee acknowledgment tracking",
]

FIXED_RECOMMENDATIONS = [
    "Consider adding this to your knowledge base for team reference",
    "Schedule periodic review to ensure continued compliance",
    "Share with relevant stakeholders for feedback and implementation",
]


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock environment variables for testing."""
    get_settings.cache_clear()
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "test-supabase-key")
    monkeypatch.setenv("OPENAI_API_KEY", "test-openai-key")
    yield
    get_settings.cache_clear()


def make_openai_client(answer):
    """Build a mock AsyncOpenAI client whose completion returns ``answer``."""
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=answer))]
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    return client


class TestCategorizeDocument:
    """Tests for the ordered keyword categorizer."""

    @pytest.mark.parametrize(
        "filename, content, expected",
        [
            ("labor_guide.txt", "", "employment_law"),
            ("", "Our Employee Handbook", "policy"),
            ("", "Interview scheduling for new hiring rounds", "recruitment"),
            ("", "Leadership development programme", "training"),
            ("", "Annual AUDIT findings", "compliance"),
            ("", "Salary bands for 2025", "benefits"),
            ("report.txt", "quarterly numbers", "general"),
        ],
    )
    def test_keyword_groups(self, filename, content, expected):
        assert categorize_document(filename, content) == expected

    def test_employment_law_beats_policy(self):
        assert categorize_document("", "This policy covers employment law") == "employment_law"

    def test_priority_not_position_breaks_ties(self):
        """Recruitment appears first in the text but policy has priority."""
        text = "Recruit interns quickly. See the procedure document."
        assert categorize_document("", text) == "policy"

    def test_filename_is_considered(self):
        assert categorize_document("benefits_2024.pdf", "nothing specific") == "benefits"

    def test_empty_inputs_are_general(self):
        assert categorize_document("", "") == "general"

    def test_substring_match_inside_words(self):
        """'law' inside 'lawsuit' still counts as a hit."""
        assert categorize_document("", "a pending lawsuit") == "employment_law"

    @pytest.mark.parametrize(
        "filename, content",
        [("", ""), ("x", "y"), ("ÜNICODE", "日本語のテキスト"), ("a" * 50, "b" * 5000)],
    )
    def test_always_returns_known_category(self, filename, content):
        assert categorize_document(filename, content) in DOCUMENT_CATEGORIES


class TestExtractKeyPoints:
    """Tests for sentence-based key point extraction."""

    def test_short_fragments_excluded(self):
        points = extract_key_points("Hi. This is a sufficiently long sentence for inclusion.")
        assert points == ["This is a sufficiently long sentence for inclusion"]

    def test_at_most_five(self):
        content = " ".join(f"Sentence number {i} is definitely long enough." for i in range(10))
        points = extract_key_points(content)
        assert len(points) == 5
        assert points[0] == "Sentence number 0 is definitely long enough"
        assert points[4] == "Sentence number 4 is definitely long enough"

    def test_repeated_terminators_split_once(self):
        content = "What a remarkable onboarding week it was!!! Did everyone sign the forms?? Yes."
        assert extract_key_points(content) == [
            "What a remarkable onboarding week it was",
            "Did everyone sign the forms",
        ]

    def test_no_terminators_whole_content(self):
        content = "   A single long statement without any terminator   "
        assert extract_key_points(content) == ["A single long statement without any terminator"]

    def test_exactly_twenty_characters_excluded(self):
        assert extract_key_points("12345678901234567890.") == []
        assert extract_key_points("123456789012345678901.") == ["123456789012345678901"]

    def test_empty_content(self):
        assert extract_key_points("") == []

    def test_length_counts_code_points(self):
        assert extract_key_points("\U0001F600" * 20 + ".") == []
        assert extract_key_points("\U0001F600" * 21 + ".") == ["\U0001F600" * 21]


class TestInsightsAndRecommendations:
    """Tests for template-based insights and recommendations."""

    def test_base_insights(self):
        assert generate_insights("nothing special") == BASE_INSIGHTS

    def test_conditional_insights_cut_by_default_limit(self):
        assert generate_insights("Remote staff termination rules") == BASE_INSIGHTS

    def test_conditional_insights_with_wider_limit(self):
        insights = generate_insights("Remote staff termination rules", limit=5)
        assert insights[3:] == [REMOTE_WORK_INSIGHT, TERMINATION_INSIGHT]

    def test_termination_only_with_wider_limit(self):
        assert generate_insights("termination letter", limit=5)[3:] == [TERMINATION_INSIGHT]

    def test_recommendations_ignore_content(self):
        assert generate_recommendations("first document") == generate_recommendations("second")
        assert generate_recommendations("") == FIXED_RECOMMENDATIONS

    def test_recommendations_are_fresh_lists(self):
        recs = generate_recommendations("x")
        recs.append("mutated")
        assert generate_recommendations("x") == FIXED_RECOMMENDATIONS


class TestAnalyzeDocumentFallback:
    """Tests for the complete keyword fallback."""

    def test_policy_example(self):
        result = analyze_document_fallback("policy.txt", POLICY_CONTENT)

        assert result.category == "policy"
        assert result.key_points == [
            "This remote work policy was updated after a termination dispute",
            "Employees must follow the handbook procedures carefully for every request submitted",
        ]
        assert result.insights == BASE_INSIGHTS
        assert result.recommendations == FIXED_RECOMMENDATIONS
        assert result.confidence == 65

    @pytest.mark.parametrize("filename, content", [("", ""), ("a.txt", "law"), ("x", "y" * 100)])
    def test_confidence_always_65(self, filename, content):
        assert analyze_document_fallback(filename, content).confidence == 65

    def test_serializes_with_camel_case(self):
        data = analyze_document_fallback("a.txt", "").model_dump(by_alias=True)
        assert set(data) == {"category", "keyPoints", "insights", "recommendations", "confidence"}


class TestParseAnalysisResponse:
    """Tests for the tagged parse outcome."""

    def test_valid_object(self):
        outcome = parse_analysis_response('{"category": "policy"}')
        assert outcome == ParsedAnalysis(payload={"category": "policy"})

    def test_fenced_json(self):
        outcome = parse_analysis_response('```json\n{"confidence": 90}\n```')
        assert isinstance(outcome, ParsedAnalysis)
        assert outcome.payload == {"confidence": 90}

    def test_prose_is_unparseable(self):
        outcome = parse_analysis_response("Category: policy. Key points: ...")
        assert isinstance(outcome, UnparseableAnalysis)
        assert "invalid JSON" in outcome.reason

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_is_unparseable(self, text):
        outcome = parse_analysis_response(text)
        assert isinstance(outcome, UnparseableAnalysis)
        assert outcome.reason == "empty response"

    def test_non_object_json_parses_to_empty_payload(self):
        assert parse_analysis_response("[1, 2, 3]") == ParsedAnalysis(payload={})

    @pytest.mark.parametrize(
        "text",
        [
            "[" * 100000,
            '{"confidence": ' + "9" * 5000 + "}",
        ],
        ids=["deep-nesting", "oversized-integer"],
    )
    def test_decoder_limits_are_unparseable(self, text):
        outcome = parse_analysis_response(text)
        assert isinstance(outcome, UnparseableAnalysis)
        assert outcome.raw_text == text
        assert outcome.reason.startswith("invalid JSON")


class TestNormalizeAnalysis:
    """Tests for merging partial LLM output with recomputed fields."""

    def test_unparseable_uses_fallback(self):
        result = normalize_analysis(UnparseableAnalysis(raw_text="x"), "policy.txt", POLICY_CONTENT)
        assert result == analyze_document_fallback("policy.txt", POLICY_CONTENT)

    def test_complete_payload_kept(self):
        payload = {
            "category": "compliance",
            "keyPoints": ["Point A", "Point B"],
            "insights": ["Insight A"],
            "recommendations": ["Do X", "Do Y"],
            "confidence": 88,
        }
        result = normalize_analysis(ParsedAnalysis(payload=payload), "f.txt", POLICY_CONTENT)

        assert result.category == "compliance"
        assert result.key_points == ["Point A", "Point B"]
        assert result.insights == ["Insight A"]
        assert result.recommendations == ["Do X", "Do Y"]
        assert result.confidence == 88

    def test_empty_payload_recomputes_with_confidence_75(self):
        result = normalize_analysis(ParsedAnalysis(payload={}), "policy.txt", POLICY_CONTENT)
        fallback = analyze_document_fallback("policy.txt", POLICY_CONTENT)

        assert result.category == fallback.category
        assert result.key_points == fallback.key_points
        assert result.insights == fallback.insights
        assert result.recommendations == fallback.recommendations
        assert result.confidence == 75

    def test_snake_case_key_points_accepted(self):
        payload = {"key_points": ["From snake case"]}
        result = normalize_analysis(ParsedAnalysis(payload=payload), "", "")
        assert result.key_points == ["From snake case"]

    def test_unknown_category_recomputed(self):
        payload = {"category": "Workplace Safety"}
        result = normalize_analysis(ParsedAnalysis(payload=payload), "policy.txt", "")
        assert result.category == "policy"

    def test_category_spelling_normalized(self):
        payload = {"category": "Employment Law"}
        result = normalize_analysis(ParsedAnalysis(payload=payload), "", "")
        assert result.category == "employment_law"

    def test_long_lists_capped(self):
        payload = {
            "keyPoints": [f"p{i}" for i in range(8)],
            "insights": [f"i{i}" for i in range(6)],
            "recommendations": [f"r{i}" for i in range(6)],
        }
        result = normalize_analysis(ParsedAnalysis(payload=payload), "", "")
        assert len(result.key_points) == 5
        assert len(result.insights) == 3
        assert len(result.recommendations) == 3

    def test_non_list_fields_recomputed(self):
        payload = {"keyPoints": "one string", "insights": {"a": 1}}
        result = normalize_analysis(ParsedAnalysis(payload=payload), "", POLICY_CONTENT)
        assert result.key_points == extract_key_points(POLICY_CONTENT)
        assert result.insights == BASE_INSIGHTS

    @pytest.mark.parametrize(
        "raw, expected",
        [(0, 75), (None, 75), ("high", 75), (True, 75), (92.6, 93), ("80", 80), (150, 100), (-5, 0)],
    )
    def test_confidence_coercion(self, raw, expected):
        result = normalize_analysis(ParsedAnalysis(payload={"confidence": raw}), "", "")
        assert result.confidence == expected


class TestBuildAnalysisPrompt:
    def test_content_truncated(self):
        prompt = build_analysis_prompt("doc.txt", "x" * 5000, 3000)
        assert "Document: doc.txt" in prompt
        assert "x" * 3000 in prompt
        assert "x" * 3001 not in prompt

    def test_lists_taxonomy(self):
        prompt = build_analysis_prompt("doc.txt", "", 3000)
        for category in DOCUMENT_CATEGORIES:
            assert category in prompt


class TestAnalyzeDocument:
    """Tests for the OpenAI-backed analysis."""

    @pytest.mark.asyncio
    async def test_parsed_answer(self, mock_env_vars):
        client = make_openai_client(
            '{"category": "benefits", "keyPoints": ["Bonus paid yearly"], "confidence": 91}'
        )
        request = DocumentAnalysisRequest(filename="comp.txt", content="Bonus paid yearly.")

        result = await analyze_document(request, openai_client=client)

        assert result.category == "benefits"
        assert result.key_points == ["Bonus paid yearly"]
        assert result.recommendations == FIXED_RECOMMENDATIONS
        assert result.confidence == 91

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 1500
        assert kwargs["messages"][0]["role"] == "system"
        assert "Document: comp.txt" in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_unparseable_answer_falls_back(self, mock_env_vars):
        client = make_openai_client("I think this is a policy document.")
        request = DocumentAnalysisRequest(filename="policy.txt", content=POLICY_CONTENT)

        result = await analyze_document(request, openai_client=client)

        assert result == analyze_document_fallback("policy.txt", POLICY_CONTENT)
        assert result.confidence == 65

    @pytest.mark.asyncio
    async def test_deeply_nested_answer_falls_back(self, mock_env_vars):
        client = make_openai_client("[" * 100000)
        request = DocumentAnalysisRequest(filename="policy.txt", content=POLICY_CONTENT)

        result = await analyze_document(request, openai_client=client)

        assert result == analyze_document_fallback("policy.txt", POLICY_CONTENT)
        assert result.confidence == 65

    @pytest.mark.asyncio
    async def test_empty_answer_falls_back(self, mock_env_vars):
        client = make_openai_client(None)
        request = DocumentAnalysisRequest(filename="a.txt", content="")

        result = await analyze_document(request, openai_client=client)

        assert result.category == "general"
        assert result.confidence == 65

    @pytest.mark.asyncio
    async def test_status_error_raises_provider_error(self, mock_env_vars):
        http_request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        error = APIStatusError(
            "Rate limited",
            response=httpx.Response(429, request=http_request),
            body=None,
        )
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=error)

        with pytest.raises(LLMProviderError) as exc_info:
            await analyze_document(DocumentAnalysisRequest(filename="a.txt"), openai_client=client)

        assert exc_info.value.status_code == 429
        assert "OpenAI API error: 429" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_error_raises_provider_error(self, mock_env_vars):
        http_request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=APIConnectionError(request=http_request)
        )

        with pytest.raises(LLMProviderError) as exc_info:
            await analyze_document(DocumentAnalysisRequest(filename="a.txt"), openai_client=client)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_missing_api_key(self, mock_env_vars, monkeypatch):
        get_settings.cache_clear()
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ProviderNotConfiguredError) as exc_info:
            await analyze_document(DocumentAnalysisRequest(filename="a.txt"))

        assert "OpenAI API key not configured" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_creates_client_from_settings(self, mock_env_vars):
        client = make_openai_client('{"category": "training"}')

        with patch(
            "hr_assistant.services.document_analyzer.get_openai_client",
            return_value=client,
        ) as mock_factory:
            result = await analyze_document(DocumentAnalysisRequest(filename="a.txt"))

        mock_factory.assert_called_once()
        assert result.category == "training"
        assert result.confidence == 75
