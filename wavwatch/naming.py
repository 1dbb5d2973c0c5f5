"""
wavwatch.naming
~~~~~~~~~~~~~~~
Pure functions that derive output file names from input paths.
No Qt, no subprocess — easy to unit-test in isolation.

Every output lands directly in the output folder, so two inputs that share
a stem (``take.mp3`` / ``take.flac``, or ``a/take.wav`` / ``b/take.wav``)
end up at the same path and the later one overwrites the earlier one.
"""

from __future__ import annotations

from pathlib import Path

TRANSCODED_SUFFIX = "_transcoded.wav"


# ── Public API ────────────────────────────────────────────────────────────────

def stem_of(path: Path | str) -> str:
    """
    Return the file name up to (not including) its FIRST dot.

    Unlike Path.stem this drops every extension, not just the last one:
        "a.b.mp3"       → "a"
        "speech.v2.mp3" → "speech"
        "noext"         → "noext"
        ".hidden.wav"   → ""
    """
    return Path(path).name.split(".", 1)[0]


def build_output_path(source_path: Path | str, output_dir: Path | str) -> Path:
    """
    Given an input file, return where its transcoded WAV goes.

    Example:
        source_path = Path("/input/sub/speech.v2.mp3")
        output_dir  = Path("/output")
        → Path("/output/speech_transcoded.wav")
    """
    return Path(output_dir) / (stem_of(source_path) + TRANSCODED_SUFFIX)
