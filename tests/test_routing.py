"""Unit tests for the model registry and route resolution."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import TypeAdapter

from chorus.registry import (
    AGGREGATE_MODEL_ID,
    DEFAULT_FANOUT_IDS,
    FLAGSHIP_PERSONA_ID,
    MODELS,
    CustomPersona,
    ModelKind,
    display_name,
    get_model,
    group_participants,
    is_persona_id,
    resolve_persona,
)
from chorus.routing import (
    FanOutRoute,
    GroupRoute,
    RouteDecision,
    SinglePersonaRoute,
    resolve_route,
)

PERSONA_IDS = [m.id for m in MODELS if m.kind == ModelKind.PERSONA]
STANDARD_IDS = [m.id for m in MODELS if m.kind == ModelKind.MODEL and m.id not in (FLAGSHIP_PERSONA_ID, AGGREGATE_MODEL_ID)]


class TestRegistry:
    """Tests for the static catalog."""

    def test_ids_are_unique(self):
        """Test that no id appears twice."""
        ids = [m.id for m in MODELS]
        assert len(ids) == len(set(ids))

    def test_unknown_id_returns_none(self):
        """Test lookup of an unknown id."""
        assert get_model("no-such-model") is None
        assert get_model(None) is None

    def test_reserved_ids_present(self):
        """Test the flagship, aggregate and default ids exist."""
        assert get_model(FLAGSHIP_PERSONA_ID) is not None
        assert get_model(AGGREGATE_MODEL_ID) is not None
        for model_id in DEFAULT_FANOUT_IDS:
            assert get_model(model_id) is not None

    def test_display_name_falls_back_to_id(self):
        """Test display names for known and unknown ids."""
        assert display_name("grok") == "Grok"
        assert display_name("mystery") == "mystery"

    def test_flagship_counts_as_persona(self):
        """Test the flagship persona is routed like a persona."""
        assert get_model(FLAGSHIP_PERSONA_ID).kind == ModelKind.MODEL
        assert is_persona_id(FLAGSHIP_PERSONA_ID)

    def test_custom_persona_is_persona(self):
        """Test custom personas of a chat count as personas."""
        pirate = CustomPersona(id="custom-pirate", name="Pirate", instructions="Talk like a pirate.")

        assert is_persona_id("custom-pirate", [pirate])
        assert not is_persona_id("custom-pirate")
        assert resolve_persona("custom-pirate", [pirate]).name == "Pirate"

    def test_group_participants_order(self):
        """Test registry members come first, unknown members are skipped."""
        pirate = CustomPersona(id="custom-pirate", name="Pirate", instructions="Arr.")
        participants = group_participants(["therapist", "nope", "yogi"], [pirate])

        assert [p.id for p in participants] == ["therapist", "yogi", "custom-pirate"]
        assert participants[0].voice == get_model("therapist").voice
        assert participants[2].voice is None


class TestResolveRoute:
    """Tests for resolve_route."""

    def test_persona_command(self):
        """Test a persona command goes to the persona responder."""
        route = resolve_route("therapist", None)

        assert route == SinglePersonaRoute(model_id="therapist")

    def test_flagship_default(self):
        """Test the flagship persona as chat default."""
        route = resolve_route(None, FLAGSHIP_PERSONA_ID)

        assert isinstance(route, SinglePersonaRoute)
        assert route.model_id == FLAGSHIP_PERSONA_ID

    def test_command_overrides_default(self):
        """Test the command wins over the chat default."""
        route = resolve_route("grok", "therapist")

        assert route == FanOutRoute(model_ids=["grok"])

    def test_nothing_resolved_uses_defaults(self):
        """Test that no command and no default fan out to the default ids."""
        route = resolve_route(None, None)

        assert route == FanOutRoute(model_ids=list(DEFAULT_FANOUT_IDS))

    def test_aggregate_id_uses_defaults(self):
        """Test the aggregate id fans out to the default ids."""
        route = resolve_route(AGGREGATE_MODEL_ID, None)

        assert route == FanOutRoute(model_ids=list(DEFAULT_FANOUT_IDS))

    def test_unknown_id_fans_out(self):
        """Test an unknown id is kept for a not-found error slot."""
        route = resolve_route("gpt-17", None)

        assert route == FanOutRoute(model_ids=["gpt-17"])

    def test_two_members_is_group_regardless_of_command(self):
        """Test a chat with two AI members is always a group."""
        route = resolve_route("grok", "gemini", ai_members=["therapist", "yogi"])

        assert isinstance(route, GroupRoute)
        assert [p.id for p in route.participants] == ["therapist", "yogi"]

    def test_member_plus_custom_persona_is_group(self):
        """Test registry members and custom personas are counted together."""
        pirate = CustomPersona(id="custom-pirate", name="Pirate", instructions="Arr.")
        route = resolve_route(None, None, ai_members=["yogi"], custom_personas=[pirate])

        assert isinstance(route, GroupRoute)
        assert len(route.participants) == 2

    def test_sole_member_answers(self):
        """Test a chat with exactly one AI member routes to that member."""
        route = resolve_route(None, None, ai_members=["motivator"])

        assert route == SinglePersonaRoute(model_id="motivator")

    def test_sole_custom_persona_answers(self):
        """Test a chat with one custom persona routes to it."""
        pirate = CustomPersona(id="custom-pirate", name="Pirate", instructions="Arr.")
        route = resolve_route(None, None, custom_personas=[pirate])

        assert route == SinglePersonaRoute(model_id="custom-pirate")

    def test_custom_fanout_defaults(self):
        """Test configured default ids are honored."""
        route = resolve_route(None, None, fanout_default_ids=("grok", "claude"))

        assert route == FanOutRoute(model_ids=["grok", "claude"])

    def test_route_decision_discriminates_on_kind(self):
        """Test the union validates from plain data."""
        adapter = TypeAdapter(RouteDecision)

        assert isinstance(adapter.validate_python({"kind": "persona", "model_id": "yogi"}), SinglePersonaRoute)
        assert isinstance(adapter.validate_python({"kind": "fan_out", "model_ids": ["grok"]}), FanOutRoute)

    @pytest.mark.parametrize("persona_id", PERSONA_IDS)
    def test_every_persona_routes_to_persona(self, persona_id):
        """Test every registry persona takes the persona path."""
        assert isinstance(resolve_route(persona_id, None), SinglePersonaRoute)

    @pytest.mark.parametrize("model_id", STANDARD_IDS)
    def test_every_standard_model_fans_out(self, model_id):
        """Test every standard model takes the fan-out path with just itself."""
        assert resolve_route(model_id, None) == FanOutRoute(model_ids=[model_id])

    @given(
        st.one_of(st.none(), st.sampled_from([m.id for m in MODELS]), st.text(min_size=1, max_size=12)),
        st.one_of(st.none(), st.sampled_from([m.id for m in MODELS])),
        st.lists(st.sampled_from(PERSONA_IDS), min_size=2, max_size=4),
    )
    def test_group_takes_precedence(self, command, default, members):
        """Property test: two or more members always produce a group route."""
        route = resolve_route(command, default, ai_members=members)

        assert isinstance(route, GroupRoute)
