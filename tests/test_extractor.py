"""Tests for PatternExtractor."""

from shadow_trader.extractor import (
    DEFAULT_MAX_TOKENS,
    PatternExtractor,
    build_prompt,
    fallback_pattern,
    insufficient_data_pattern,
)
from shadow_trader.oracle import StubOracle
from shadow_trader.types import ExtractionStatus, PatternType
from tests.conftest import FailingOracle, ScriptedOracle


class TestBuildPrompt:
    """Tests for the extraction prompt."""

    def test_embeds_digest(self) -> None:
        prompt = build_prompt("Transaction count: 42")

        assert "Transaction count: 42" in prompt

    def test_names_categories_and_format(self) -> None:
        """Test the prompt asks for timing, value and behavioral patterns."""
        prompt = build_prompt("digest")

        assert "Trading times" in prompt
        assert "Value patterns" in prompt
        assert "Behavioral patterns" in prompt
        assert "Return ONLY a JSON array" in prompt
        assert '"confidence": 0.75' in prompt


class TestCannedPatterns:
    """Tests for the fixed fallback and low-data patterns."""

    def test_fallback_pattern(self) -> None:
        pattern = fallback_pattern()

        assert pattern.type == PatternType.SEQUENCE
        assert pattern.description == "Regular activity pattern detected"
        assert pattern.confidence == 0.6
        assert pattern.occurrences == 3

    def test_insufficient_data_pattern(self) -> None:
        pattern = insufficient_data_pattern()

        assert pattern.type == PatternType.TIMING
        assert pattern.description == "Insufficient data for pattern analysis"
        assert pattern.confidence == 0
        assert pattern.occurrences == 0
        assert pattern.actions == ()


class TestExtract:
    """Tests for extraction outcomes."""

    def test_parsed_patterns(self) -> None:
        """Test a good oracle reply becomes patterns."""
        extractor = PatternExtractor(ScriptedOracle())

        result = extractor.extract_result("digest")

        assert result.status == ExtractionStatus.PARSED
        assert len(result.patterns) == 2

    def test_oracle_called_once_with_budget(self) -> None:
        """Test one call with the default token budget and the digest."""
        oracle = ScriptedOracle()
        extractor = PatternExtractor(oracle, timeout=30.0)

        extractor.extract("Active sessions: 3")

        assert len(oracle.calls) == 1
        assert oracle.calls[0]["max_tokens"] == DEFAULT_MAX_TOKENS == 2000
        assert oracle.calls[0]["timeout"] == 30.0
        assert "Active sessions: 3" in oracle.calls[0]["prompt"]

    def test_call_timeout_overrides_default(self) -> None:
        oracle = ScriptedOracle()
        extractor = PatternExtractor(oracle, timeout=30.0)

        extractor.extract("d", timeout=5.0)

        assert oracle.calls[0]["timeout"] == 5.0

    def test_no_oracle_returns_fallback(self) -> None:
        """Test the stub oracle always yields exactly the fallback pattern."""
        extractor = PatternExtractor(StubOracle())

        result = extractor.extract_result("digest")

        assert result.status == ExtractionStatus.UNAVAILABLE
        assert result.patterns == [fallback_pattern()]

    def test_oracle_failure_returns_fallback(self) -> None:
        """Test a failing oracle degrades to the fallback without raising."""
        oracle = FailingOracle()
        extractor = PatternExtractor(oracle)

        patterns = extractor.extract("digest")

        assert oracle.calls == 1
        assert patterns == [fallback_pattern()]

    def test_unparseable_reply_is_empty(self) -> None:
        """Test an unusable reply yields an empty list, not the fallback."""
        extractor = PatternExtractor(ScriptedOracle("Sorry, no idea."))

        result = extractor.extract_result("digest")

        assert result.status == ExtractionStatus.EMPTY
        assert result.patterns == []

    def test_unexpected_oracle_error_returns_fallback(self) -> None:
        """Test errors outside OracleError also degrade to the fallback."""

        class BrokenOracle(ScriptedOracle):
            def complete(self, prompt, max_tokens, timeout=None):
                raise RuntimeError("socket closed")

        extractor = PatternExtractor(BrokenOracle())

        result = extractor.extract_result("digest")

        assert result.status == ExtractionStatus.UNAVAILABLE
        assert result.patterns == [fallback_pattern()]

    def test_deeply_nested_reply_is_empty(self) -> None:
        """Test a reply too deeply nested to decode yields an empty list."""
        extractor = PatternExtractor(ScriptedOracle("[" * 5000 + "]" * 5000))

        result = extractor.extract_result("digest")

        assert result.status == ExtractionStatus.EMPTY
        assert extractor.extract("digest") == []
