from beautybird.pipeline.booking_pipeline import BookingPipeline, build_pipeline
from beautybird.pipeline.state_machine import (
    BookingState,
    BookingStateMachine,
    BookingTrigger,
)
from beautybird.pipeline.validator import BookingValidator

__all__ = [
    "BookingPipeline",
    "build_pipeline",
    "BookingState",
    "BookingStateMachine",
    "BookingTrigger",
    "BookingValidator",
]
