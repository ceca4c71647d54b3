"""
Serialization utilities - Program <-> step records

A Program is exchanged with the host as an ordered array of
{id, kind, duration, distance?, scale?} records; optional fields that do
not apply are omitted. This is the only persisted/transmitted shape; the
block graph itself is never serialized.
"""

from typing import Any, Dict, Iterable, List, Sequence, Union

from pydantic import ValidationError

from motionblocks.models.enums import StepKind
from motionblocks.models.errors import ProgramFormatError
from motionblocks.models.step import AnimationStep, Program
from motionblocks.schemas.program import StepRecord, ProgramRecords
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.GENERAL)


class Serializer:
    """Central program serialization for the host boundary"""

    # ========================================================================
    # STEP SERIALIZATION
    # ========================================================================

    @staticmethod
    def step_to_model(step: AnimationStep) -> StepRecord:
        return StepRecord(
            id=step.id,
            kind=step.kind.value,
            duration=step.duration,
            distance=step.distance,
            scale=step.scale,
        )

    @staticmethod
    def step_to_record(step: AnimationStep) -> Dict[str, Any]:
        return Serializer.step_to_model(step).model_dump(exclude_none=True)

    @staticmethod
    def step_from_record(record: Union[StepRecord, Dict[str, Any]]) -> AnimationStep:
        if not isinstance(record, StepRecord):
            try:
                record = StepRecord.model_validate(record)
            except ValidationError as ex:
                raise ProgramFormatError(f"Invalid step record: {ex.error_count()} error(s)", ex.errors()) from ex
        return AnimationStep(
            id=record.id,
            kind=StepKind(record.kind),
            duration=record.duration,
            distance=record.distance,
            scale=record.scale,
        )

    # ========================================================================
    # PROGRAM SERIALIZATION
    # ========================================================================

    @staticmethod
    def program_to_records(program: Sequence[AnimationStep]) -> List[Dict[str, Any]]:
        return [Serializer.step_to_record(step) for step in program]

    @staticmethod
    def program_from_records(records: Iterable[Any]) -> Program:
        """
        Validate host records and build a Program.

        Raises:
            ProgramFormatError: on the first invalid record (index in message)
        """
        steps = []
        for index, record in enumerate(records):
            try:
                steps.append(Serializer.step_from_record(record))
            except ProgramFormatError as ex:
                raise ProgramFormatError(f"Step {index}: {ex}", ex.errors) from ex
        return tuple(steps)

    @staticmethod
    def program_to_json(program: Sequence[AnimationStep]) -> str:
        records = [Serializer.step_to_model(step) for step in program]
        return ProgramRecords.dump_json(records, exclude_none=True).decode("utf-8")

    @staticmethod
    def program_from_json(text: Union[str, bytes]) -> Program:
        try:
            records = ProgramRecords.validate_json(text)
        except ValidationError as ex:
            log.warn("Rejected program JSON", errors=ex.error_count())
            raise ProgramFormatError(f"Invalid program JSON: {ex.error_count()} error(s)", ex.errors()) from ex
        return tuple(Serializer.step_from_record(r) for r in records)
