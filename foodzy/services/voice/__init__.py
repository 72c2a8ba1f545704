"""
Voice Input Module

Speech capture happens in the browser; this module handles the
recognized transcripts.
"""

from foodzy.services.voice.handler import VOICE_UNSUPPORTED, VoiceHandler, VoiceUnavailable

__all__ = [
    "VoiceHandler",
    "VoiceUnavailable",
    "VOICE_UNSUPPORTED",
]
