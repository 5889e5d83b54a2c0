"""
Voice-note processing for VoiceLog.

- storage: download a Telegram voice file to a scoped temporary path
- stt: speech-to-text
- extraction: transcript → JSON record candidate
- mapper: candidate → finalized ExtractedRecord
- pipeline: orchestrates the above and reports back to the sender
"""
