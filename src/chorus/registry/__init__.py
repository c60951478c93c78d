from .catalog import (
    AGGREGATE_MODEL_ID,
    DEFAULT_FANOUT_IDS,
    EXTERNAL_MODEL_ID,
    FLAGSHIP_PERSONA_ID,
    MODELS,
    NON_QUERYABLE_IDS,
    display_name,
    get_model,
    group_participants,
    is_persona_id,
    resolve_persona,
)
from .models import CustomPersona, ModelDescriptor, ModelKind, Participant

__all__ = [
    "AGGREGATE_MODEL_ID",
    "DEFAULT_FANOUT_IDS",
    "EXTERNAL_MODEL_ID",
    "FLAGSHIP_PERSONA_ID",
    "MODELS",
    "NON_QUERYABLE_IDS",
    "display_name",
    "get_model",
    "group_participants",
    "is_persona_id",
    "resolve_persona",
    "CustomPersona",
    "ModelDescriptor",
    "ModelKind",
    "Participant",
]
