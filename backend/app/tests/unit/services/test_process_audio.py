"""Test the WAV conversion of synthesized speech."""

import base64
import wave

import pytest

from nexus.services.process_audio import AudioFormatError, ProcessAudio


def test_sample_rate_comes_from_mime_type() -> None:
    audio = ProcessAudio(default_sample_rate=16000)

    assert audio.sample_rate("audio/L16;codec=pcm;rate=24000") == 24000
    assert audio.sample_rate("audio/L16") == 16000
    assert audio.sample_rate(None) == 16000


def test_pcm_is_wrapped_in_a_wav_container() -> None:
    pcm = b"\x00\x00\xff\x7f" * 100
    audio = ProcessAudio()

    wav_audio = audio.to_wav(base64.b64encode(pcm).decode(), "audio/L16;rate=24000")

    assert wav_audio.name == "audio.wav"
    with wave.open(wav_audio, "rb") as wav_file:
        assert wav_file.getframerate() == 24000
        assert wav_file.getnchannels() == 1
        assert wav_file.getsampwidth() == 2
        assert wav_file.readframes(wav_file.getnframes()) == pcm


def test_wav_payload_is_passed_through() -> None:
    payload = b"RIFF" + b"\x00" * 40

    wav_audio = ProcessAudio().to_wav(base64.b64encode(payload).decode())

    assert wav_audio.getvalue() == payload


def test_trailing_partial_frame_is_dropped() -> None:
    pcm = b"\x00\x00\x01"

    wav_audio = ProcessAudio().to_wav(base64.b64encode(pcm).decode(), "audio/L16;rate=24000")

    with wave.open(wav_audio, "rb") as wav_file:
        assert wav_file.getnframes() == 1
        assert wav_file.readframes(1) == b"\x00\x00"


def test_pcm_mime_types_are_recognized() -> None:
    assert ProcessAudio.is_pcm(None)
    assert ProcessAudio.is_pcm("audio/L16;codec=pcm;rate=24000")
    assert ProcessAudio.is_pcm("audio/pcm")
    assert not ProcessAudio.is_pcm("audio/mpeg")


def test_non_pcm_audio_is_rejected() -> None:
    payload = base64.b64encode(b"ID3\x03\x00").decode()

    with pytest.raises(AudioFormatError):
        ProcessAudio().to_wav(payload, "audio/mpeg")


def test_invalid_base64_is_rejected() -> None:
    with pytest.raises(AudioFormatError):
        ProcessAudio().to_wav("not base64!", "audio/L16")
