"""Handling synthesized audio."""

import base64
import binascii
import re
from io import BytesIO
from typing import Optional

from pydub import AudioSegment  # type: ignore

RATE_PATTERN = re.compile(r"rate=(\d+)")
PCM_MIME_TYPES = ("audio/l16", "audio/pcm")


class AudioFormatError(ValueError):
    """The stored audio cannot be rendered as WAV."""


class ProcessAudio:
    """Turn the raw PCM returned by the speech model into a playable WAV file."""

    def __init__(self, default_sample_rate: int = 24000, sample_width: int = 2, channels: int = 1) -> None:
        """Initialize the class."""
        self.default_sample_rate = default_sample_rate
        self.sample_width = sample_width
        self.channels = channels

    def sample_rate(self, mime_type: Optional[str]) -> int:
        """Read the rate parameter of an audio/L16 mime type, or use the default."""
        if mime_type:
            match = RATE_PATTERN.search(mime_type)
            if match:
                return int(match.group(1))
        return self.default_sample_rate

    @staticmethod
    def is_pcm(mime_type: Optional[str]) -> bool:
        """No mime type means raw PCM, which is what the speech model returns."""
        if not mime_type:
            return True
        return mime_type.split(";", 1)[0].strip().lower() in PCM_MIME_TYPES

    def to_wav(self, audio_data: str, mime_type: Optional[str] = None) -> BytesIO:
        """
        Decode base64 audio and export it as WAV.

        Raises:
            AudioFormatError: the payload is not base64, or is neither a WAV
                container nor PCM audio.
        """
        try:
            pcm = base64.b64decode(audio_data)
        except (binascii.Error, ValueError) as e:
            raise AudioFormatError(f"Audio is not valid base64 data: {e}") from e

        if pcm.startswith(b"RIFF"):
            # Already a WAV container.
            wav_audio = BytesIO(pcm)
            wav_audio.name = "audio.wav"
            return wav_audio

        if not self.is_pcm(mime_type):
            raise AudioFormatError(f"Cannot convert {mime_type} audio to WAV.")

        # Drop a trailing partial frame.
        frame_size = self.sample_width * self.channels
        pcm = pcm[: len(pcm) - len(pcm) % frame_size]

        segment = AudioSegment(
            data=pcm,
            sample_width=self.sample_width,
            frame_rate=self.sample_rate(mime_type),
            channels=self.channels,
        )
        wav_audio = BytesIO()
        segment.export(wav_audio, format="wav")

        # Ensure the BytesIO object is set to the start
        wav_audio.seek(0)
        wav_audio.name = "audio.wav"
        return wav_audio
