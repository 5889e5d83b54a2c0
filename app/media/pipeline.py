"""
Voice-note pipeline.

One call handles one voice note end-to-end:

    download → transcribe → extract + map → persist → report

Stages run strictly in sequence. Any stage failure ends the job as
"failed" with one generic message to the sender; a persistence failure
gets its own "failed to save" message instead. The downloaded audio is
removed on every exit path before the outcome is reported.
"""

from __future__ import annotations

import logging

from app.media import extraction, mapper, storage, stt
from app.media.errors import PipelineError
from app.media.models import (
    DOWNLOADED,
    EXTRACTED,
    PERSISTED,
    TRANSCRIBED,
    ExtractedRecord,
    VoiceJob,
    VoiceNoteEvent,
)
from app.services import notion, telegram

logger = logging.getLogger(__name__)

GENERIC_FAILURE_TEXT = "⚠️ Something went wrong processing your message."
SAVE_FAILURE_TEXT = "❌ Failed to save to Notion. Check console/logs."


def transcript_text(transcript: str) -> str:
    return f'📝 Transcript: "{transcript}"\n\n🧠 Extracting data...'


def saved_text(record: ExtractedRecord) -> str:
    return (
        "✅ Saved to Notion!\n\n"
        f"Item: {record.item}\n"
        f"Amount: {record.amount}\n"
        f"Category: {record.category}\n"
        f"Date: {record.date}"
    )


def notify(job: VoiceJob, text: str) -> None:
    """Best-effort message to the sender; failures never reach the job."""
    try:
        telegram.send_message(job.sender_id, text, parse_mode=None)
    except Exception:  # noqa: BLE001
        logger.exception("[VOICE] could not notify sender %s", job.sender_id)


def run_voice_pipeline(job: VoiceJob) -> VoiceJob:
    """
    Process a VoiceJob to a terminal status ("persisted" or "failed").

    Never raises; the returned job carries the outcome.
    """
    saved = False
    try:
        with storage.voice_file(job.file_ref, job.sender_id) as path:
            job.local_artifact_path = path
            job.advance(DOWNLOADED)

            with open(path, "rb") as audio:
                job.transcript = stt.perform_stt(audio)
            job.advance(TRANSCRIBED)
            notify(job, transcript_text(job.transcript))

            candidate = extraction.extract_record(job.transcript)
            job.record = mapper.map_record(candidate, job.transcript)
            job.advance(EXTRACTED)

            saved = notion.save_record(job.record)
    except PipelineError as e:
        logger.error(
            "[VOICE] %s failed for sender %s (%s): %s",
            e.stage, job.sender_id, job.file_ref, e,
            exc_info=e.__cause__ is not None,
        )
        job.fail(f"{e.stage}: {e}")
        notify(job, GENERIC_FAILURE_TEXT)
        return job
    except Exception as e:  # noqa: BLE001
        logger.exception(
            "[VOICE] unexpected error for sender %s (%s)", job.sender_id, job.file_ref
        )
        job.fail(f"unexpected: {e}")
        notify(job, GENERIC_FAILURE_TEXT)
        return job
    finally:
        # voice_file() has removed the download by now
        job.local_artifact_path = None

    if saved:
        job.advance(PERSISTED)
        notify(job, saved_text(job.record))
    else:
        logger.error("[VOICE] could not save record for sender %s", job.sender_id)
        job.fail("persistence: store rejected or failed the write")
        notify(job, SAVE_FAILURE_TEXT)
    return job


def handle_voice_note(event: VoiceNoteEvent) -> VoiceJob:
    """Entry point for an inbound voice note."""
    logger.info("[VOICE] received %s from sender %s", event.file_ref, event.sender_id)
    job = VoiceJob.from_event(event)
    return run_voice_pipeline(job)
