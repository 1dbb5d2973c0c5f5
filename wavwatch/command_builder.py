"""
wavwatch.command_builder
~~~~~~~~~~~~~~~~~~~~~~~~
The one ffmpeg invocation wavwatch makes, as an argv list.

The flags are fixed: every input, whatever its format, comes out as 16 kHz
mono signed 16-bit PCM. Nothing here runs a process; transcode.py does.
"""

from __future__ import annotations

import shlex
from pathlib import Path

# Fixed output format: mono, 16 kHz, signed 16-bit PCM.
CHANNELS      = "1"
SAMPLE_RATE   = "16000"
SAMPLE_FORMAT = "s16"


def build_transcode_command(
    ffmpeg_bin: str,
    input_file: Path,
    output_file: Path,
) -> list[str]:
    """
    Build the full ffmpeg command for transcoding one file.

    The command structure is:
        ffmpeg
          -i <input>
          -ac 1                  ← mono
          -ar 16000              ← 16 kHz
          -sample_fmt s16        ← signed 16-bit samples
          -y                     ← overwrite output without prompting
          <output>

    Example output:
        ['/usr/bin/ffmpeg', '-i', '/input/speech.v2.mp3',
         '-ac', '1', '-ar', '16000', '-sample_fmt', 's16',
         '-y', '/output/speech_transcoded.wav']
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)

    return [
        str(ffmpeg_bin),
        "-i", str(input_file),
        "-ac", CHANNELS,
        "-ar", SAMPLE_RATE,
        "-sample_fmt", SAMPLE_FORMAT,
        "-y",
        str(output_file),
    ]


def command_as_string(cmd: list[str]) -> str:
    """Shell-quoted command line, so paths with spaces can be pasted as-is."""
    return shlex.join(cmd)
