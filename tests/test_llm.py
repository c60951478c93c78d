"""Unit tests for the generation providers."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from chorus.errors import UnsupportedInputCombination
from chorus.llm import (
    Attachment,
    FileAttachment,
    GeminiProvider,
    GenerationProvider,
    HistoryItem,
    OpenAICompatibleProvider,
    create_generation_provider,
)
from chorus.llm.providers.gemini import extract_text
from chorus.llm.providers.openai_compatible import XAI_BASE_URL
from chorus.responders import PersonaReply

PDF = FileAttachment(name="doc.pdf", data_uri="data:application/pdf;base64,JVBERi0=", mime_type="application/pdf")


class TestModels:
    """Tests for llm data models."""

    def test_attachment_describe(self):
        """Test human readable attachment labels."""
        assert Attachment(file=PDF).describe() == "Analyzed file: doc.pdf"
        assert Attachment(url="https://x.dev").describe() == "Analyzed URL: https://x.dev"
        assert Attachment().is_empty

    def test_decode_data_uri(self):
        """Test the base64 payload is decoded."""
        assert PDF.decode() == b"%PDF-"

    def test_decode_rejects_plain_text(self):
        """Test a non data URI is rejected."""
        bad = FileAttachment(name="a", data_uri="hello", mime_type="text/plain")

        with pytest.raises(ValueError):
            bad.decode()

    @given(st.binary(max_size=64))
    def test_decode_any_payload(self, payload):
        """Property test: any encoded payload decodes back."""
        import base64

        attachment = FileAttachment(
            name="f",
            data_uri="data:application/octet-stream;base64," + base64.b64encode(payload).decode(),
            mime_type="application/octet-stream",
        )
        assert attachment.decode() == payload


class TestGenerationProviderInterface:
    """Tests for the abstract interface."""

    def test_provider_is_abstract(self):
        """Test that GenerationProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            GenerationProvider()  # type: ignore


class TestGeminiProvider:
    """Tests for GeminiProvider message conversion."""

    def test_convert_roles(self):
        """Test assistant turns become model turns and system turns are lifted."""
        provider = GeminiProvider(api_key="fake-key")

        system, contents = provider._convert_messages([
            HistoryItem(role="system", content="be nice"),
            HistoryItem(role="user", content="hi"),
            HistoryItem(role="assistant", content="hello"),
        ])

        assert system == "be nice"
        assert [c.role for c in contents] == ["user", "model"]
        assert contents[1].parts[0].text == "hello"

    def test_attachment_joins_last_user_turn(self):
        """Test the URL and file become parts of the last user turn."""
        provider = GeminiProvider(api_key="fake-key")

        _, contents = provider._convert_messages(
            [HistoryItem(role="user", content="read this")],
            Attachment(file=PDF, url="https://x.dev"),
        )

        parts = contents[-1].parts
        assert len(contents) == 1
        assert parts[0].text == "read this"
        assert "https://x.dev" in parts[1].text
        assert parts[2].inline_data.mime_type == "application/pdf"
        assert parts[2].inline_data.data == b"%PDF-"

    def test_extract_text_from_parts(self):
        """Test text parts are joined."""
        from types import SimpleNamespace

        response = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[
            SimpleNamespace(text="Hello, "),
            SimpleNamespace(text="world"),
        ]))])

        assert extract_text(response) == "Hello, world"

    def test_parse_output_validates_json(self):
        """Test structured output is validated against the schema."""
        from types import SimpleNamespace

        provider = GeminiProvider(api_key="fake-key")
        text = PersonaReply(
            final_answer="hi", emotion="happy", intent="chat", detected_language="English"
        ).model_dump_json()

        output = provider._parse_output(SimpleNamespace(parsed=None), text, PersonaReply)
        broken = provider._parse_output(SimpleNamespace(parsed=None), "{not json", PersonaReply)

        assert output.final_answer == "hi"
        assert broken is None

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_generate_real_api(self, api_keys):
        """Integration test: Generate with the real API."""
        if not api_keys["gemini"]:
            pytest.skip("GEMINI_API_KEY not set")

        provider = GeminiProvider(api_key=api_keys["gemini"])
        try:
            result = await provider.generate([HistoryItem(role="user", content="Say hello in one word.")])
            assert result.text
        finally:
            await provider.close()


class TestOpenAICompatibleProvider:
    """Tests for the OpenAI-compatible (xAI) provider."""

    async def test_attachment_not_supported(self):
        """Test attachments are rejected before any request."""
        provider = OpenAICompatibleProvider(api_key="fake-key")

        try:
            with pytest.raises(UnsupportedInputCombination):
                await provider.generate(
                    [HistoryItem(role="user", content="summarize")],
                    attachment=Attachment(url="https://x.dev"),
                )
        finally:
            await provider.close()

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_generate_real_api(self, api_keys):
        """Integration test: Generate with the real xAI API."""
        if not api_keys["grok"]:
            pytest.skip("GROK_API_KEY not set")

        async with OpenAICompatibleProvider(api_key=api_keys["grok"]) as provider:
            result = await provider.generate([HistoryItem(role="user", content="Say hello in one word.")])
            assert result.text


class TestGenerationFactory:
    """Tests for create_generation_provider."""

    def test_create_gemini(self):
        """Test creating a Gemini provider."""
        provider = create_generation_provider("gemini", api_key="fake-key", model="gemini-2.5-pro")

        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-pro"

    @pytest.mark.parametrize("name", ["xai", "grok", "XAI"])
    async def test_create_xai(self, name):
        """Test xAI aliases create an OpenAI-compatible provider on the xAI endpoint."""
        provider = create_generation_provider(name, api_key="fake-key")

        try:
            assert isinstance(provider, OpenAICompatibleProvider)
            assert provider.model == "grok-3"
            assert str(provider._client.base_url).rstrip("/") == XAI_BASE_URL
        finally:
            await provider.close()

    def test_missing_key(self):
        """Test a missing key is a TypeError."""
        with pytest.raises(TypeError, match="api_key"):
            create_generation_provider("gemini")

    def test_openai_requires_model(self):
        """Test the generic OpenAI provider needs a model."""
        with pytest.raises(TypeError, match="model"):
            create_generation_provider("openai", api_key="fake-key")

    def test_unknown_provider(self):
        """Test unknown providers are rejected."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_generation_provider("cohere", api_key="fake-key")
