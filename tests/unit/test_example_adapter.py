import pytest

from transcript_analyzer.providers.example_adapter import ExampleProviderAdapter
from transcript_analyzer.providers.models import ProviderName


class TestExampleProviderAdapter:
    @pytest.mark.asyncio
    async def test_returns_deterministic_analysis(self) -> None:
        adapter = ExampleProviderAdapter(ProviderName.CLAUDE)

        result = await adapter.analyze(
            transcript="one two three",
            prompt="Summarize the key issues raised by the customer",
            model="claude-test",
            filename="call.txt",
        )

        assert result.model == "claude-test"
        assert result.filename == "call.txt"
        assert result.analysis.startswith("[claude:claude-test]")
        assert "3 words analyzed" in result.analysis
        assert result.metadata.tokens == 3
