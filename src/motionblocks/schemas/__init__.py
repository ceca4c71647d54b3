from motionblocks.schemas.program import StepRecord, StepKindTag, ProgramRecords

__all__ = ["StepRecord", "StepKindTag", "ProgramRecords"]
