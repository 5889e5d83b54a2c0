"""
Failure taxonomy for the voice-note pipeline.

Each stage raises its own subclass so the orchestrator can log which stage
broke; the sender only ever sees one generic failure message.
Persistence failures are not part of this hierarchy: the Notion adapter
reports them as a boolean.
"""


class PipelineError(Exception):
    """Base class for failures that abort a single voice job."""

    stage = "pipeline"


class RetrievalError(PipelineError):
    """The voice file could not be resolved, downloaded or written to disk."""

    stage = "retrieval"


class TranscriptionError(PipelineError):
    """Speech-to-text failed or produced no text."""

    stage = "transcription"


class ExtractionError(PipelineError):
    """The language model returned nothing usable as a JSON object."""

    stage = "extraction"
