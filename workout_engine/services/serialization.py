"""
Encode/decode pair for the JSON blobs stored on entities.

Set lists and instruction blocks are opaque text columns. Decoding never raises: a missing
or corrupt blob degrades to an empty list / default instructions.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from workout_engine.schemas.set_record import ExerciseInstructions, SetRecord

logger = logging.getLogger(__name__)

_set_list_adapter = TypeAdapter(list[SetRecord])


def encode_sets(sets: list[SetRecord]) -> str:
    return _set_list_adapter.dump_json(sets).decode("utf-8")


def decode_sets(data: str | bytes | None) -> list[SetRecord]:
    if not data:
        return []
    try:
        return _set_list_adapter.validate_json(data)
    except ValidationError as e:
        logger.warning("Discarding undecodable set list (%d errors)", e.error_count())
        return []


def encode_instructions(instructions: ExerciseInstructions) -> str:
    return instructions.model_dump_json()


def decode_instructions(data: str | bytes | None) -> ExerciseInstructions:
    if not data:
        return ExerciseInstructions()
    try:
        return ExerciseInstructions.model_validate_json(data)
    except ValidationError as e:
        logger.warning("Discarding undecodable instructions (%d errors)", e.error_count())
        return ExerciseInstructions()
