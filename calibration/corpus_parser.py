"""
Corpus Parser — Reads Labeled Calibration Samples

Parses the simple text format used for calibration corpus files.
Each sample is one field value preceded by metadata lines,
separated by '---' delimiters.

Format:
    ---
    channel: audience
    expected: off_topic
    source: support ticket #212
    notes: pet as audience

    my cat

    ---

channel defaults to topic and expected to safe. The text is stripped of
surrounding blank lines only; a multi-line value is kept as written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from kaizen.classifier import Channel, Verdict


@dataclass
class CalibrationSample:
    """A single labeled sample from the calibration corpus."""
    text: str
    channel: Channel
    expected: Verdict
    source: str
    notes: str

    # Populated after classification
    actual: Optional[Verdict] = None

    @property
    def correct(self) -> bool:
        return self.actual is self.expected


_METADATA = re.compile(r"^(channel|expected|source|notes)\s*:\s*(.+)$", re.IGNORECASE)


def parse_corpus(filepath: str | Path) -> list[CalibrationSample]:
    """
    Parse a calibration corpus file into a list of samples.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if a block names an unknown channel or verdict.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    content = filepath.read_text(encoding="utf-8")

    # Split on lines that are just ---, at start, between blocks and at end
    blocks = re.split(r"(?:^|\n)\s*---\s*(?:\n|$)", content)

    samples = []
    for block in blocks:
        block = block.strip()
        if not block:
            continue

        # Comment-only blocks parse to None
        sample = _parse_block(block)
        if sample:
            samples.append(sample)

    return samples


def _parse_block(block: str) -> Optional[CalibrationSample]:
    """Parse a single sample block."""
    metadata = {}
    text_lines = []
    in_text = False

    for line in block.split("\n"):
        stripped = line.strip()
        if not in_text:
            if stripped.startswith("#"):
                continue
            match = _METADATA.match(stripped)
            if match:
                metadata[match.group(1).lower()] = match.group(2).strip()
            elif stripped:
                in_text = True
                text_lines.append(line)
        else:
            text_lines.append(line)

    text = "\n".join(text_lines).strip()
    if not text:
        return None

    channel = metadata.get("channel", "topic").lower()
    expected = metadata.get("expected", "safe").lower()
    try:
        return CalibrationSample(
            text=text,
            channel=Channel(channel),
            expected=Verdict(expected),
            source=metadata.get("source", "unknown"),
            notes=metadata.get("notes", ""),
        )
    except ValueError as e:
        raise ValueError(f"Bad corpus block ({e}): {text[:60]!r}") from e


def parse_all_corpora(corpus_dir: str | Path) -> list[CalibrationSample]:
    """Parse all .txt corpus files in a directory."""
    corpus_dir = Path(corpus_dir)
    samples = []
    for filepath in sorted(corpus_dir.glob("*.txt")):
        samples.extend(parse_corpus(filepath))
    return samples
